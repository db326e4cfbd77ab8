"""Twitch chat over IRC (TLS).

Only the parts the bot needs: login, JOIN, PING/PONG, reading PRIVMSG with
IRCv3 tags, and sending PRIVMSG. No reconnect; when the server closes the
connection the reader thread logs it and exits.
"""

from __future__ import annotations

import logging
import socket
import ssl
import threading
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from ...contracts.v1 import InboundMessageEvent
from .base import ChatTransport, EventSink

logger = logging.getLogger("joelbot.ports.chat.twitch")

_TAG_ESCAPES = {":": ";", "s": " ", "\\": "\\", "r": "\r", "n": "\n"}
_MAX_LINE = 8192


@dataclass
class IrcLine:
    command: str
    params: List[str] = field(default_factory=list)
    prefix: str = ""
    tags: Dict[str, str] = field(default_factory=dict)

    @property
    def nick(self) -> str:
        return self.prefix.split("!", 1)[0] if self.prefix else ""

    @property
    def trailing(self) -> str:
        return self.params[-1] if self.params else ""


def _unescape_tag(value: str) -> str:
    out: List[str] = []
    i = 0
    while i < len(value):
        ch = value[i]
        if ch == "\\" and i + 1 < len(value):
            out.append(_TAG_ESCAPES.get(value[i + 1], value[i + 1]))
            i += 2
            continue
        if ch != "\\":
            out.append(ch)
        i += 1
    return "".join(out)


def parse_irc_line(raw: str) -> Optional[IrcLine]:
    line = raw.rstrip("\r\n")
    if not line:
        return None
    tags: Dict[str, str] = {}
    if line.startswith("@"):
        tag_part, _, line = line[1:].partition(" ")
        for item in tag_part.split(";"):
            if not item:
                continue
            key, _, value = item.partition("=")
            tags[key] = _unescape_tag(value)
        line = line.lstrip(" ")
    prefix = ""
    if line.startswith(":"):
        prefix, _, line = line[1:].partition(" ")
        line = line.lstrip(" ")
    trailing: Optional[str] = None
    if " :" in line:
        line, _, trailing = line.partition(" :")
    elif line.startswith(":"):
        line, trailing = "", line[1:]
    parts = line.split()
    if not parts:
        return None
    params = parts[1:]
    if trailing is not None:
        params.append(trailing)
    return IrcLine(command=parts[0].upper(), params=params, prefix=prefix, tags=tags)


def is_moderator(tags: Dict[str, str]) -> bool:
    if tags.get("mod") == "1":
        return True
    badges = tags.get("badges", "")
    return any(b.split("/", 1)[0] == "broadcaster" for b in badges.split(",") if b)


def normalize_channel(name: str) -> str:
    return str(name or "").strip().lstrip("#").lower()


def message_event_from_line(msg: IrcLine) -> Optional[InboundMessageEvent]:
    if msg.command != "PRIVMSG" or len(msg.params) < 2:
        return None
    sender = msg.tags.get("login") or msg.nick
    return InboundMessageEvent(
        channel=normalize_channel(msg.params[0]),
        sender=sender.lower(),
        text=msg.trailing,
        is_moderator=is_moderator(msg.tags),
    )


class TwitchIrcTransport(ChatTransport):
    def __init__(
        self,
        *,
        username: str,
        token: str,
        channels: Sequence[str],
        host: str = "irc.chat.twitch.tv",
        port: int = 6697,
        timeout_s: float = 10.0,
    ) -> None:
        self.username = str(username or "").strip().lower()
        self.token = str(token or "").strip()
        self.channels = [normalize_channel(c) for c in channels if normalize_channel(c)]
        self.host = host
        self.port = int(port)
        self.timeout_s = float(timeout_s)
        self._sock: Optional[socket.socket] = None
        self._send_lock = threading.Lock()
        self._reader: Optional[threading.Thread] = None
        self._closing = threading.Event()

    def _password(self) -> str:
        return self.token if self.token.startswith("oauth:") else f"oauth:{self.token}"

    def _write(self, line: str) -> None:
        sock = self._sock
        if sock is None:
            raise ConnectionError("not connected")
        data = (line.replace("\r", " ").replace("\n", " ") + "\r\n").encode("utf-8")
        with self._send_lock:
            sock.sendall(data)

    def connect(self, sink: EventSink) -> None:
        raw = socket.create_connection((self.host, self.port), timeout=self.timeout_s)
        ctx = ssl.create_default_context()
        sock = ctx.wrap_socket(raw, server_hostname=self.host)
        sock.settimeout(None)
        self._sock = sock
        self._write("CAP REQ :twitch.tv/tags twitch.tv/commands")
        self._write(f"PASS {self._password()}")
        self._write(f"NICK {self.username}")
        for channel in self.channels:
            self._write(f"JOIN #{channel}")
        self._reader = threading.Thread(
            target=self._read_loop, args=(sock, sink), name="joelbot-irc-reader", daemon=True
        )
        self._reader.start()
        logger.info("Connection established as @%s.", self.username, extra={"channels": self.channels})

    def send(self, channel: str, text: str) -> None:
        self._write(f"PRIVMSG #{normalize_channel(channel)} :{text}")

    def close(self) -> None:
        self._closing.set()
        sock, self._sock = self._sock, None
        if sock is None:
            return
        try:
            sock.close()
        except Exception:
            pass

    def handle_line(self, raw: str, sink: EventSink) -> None:
        msg = parse_irc_line(raw)
        if msg is None:
            return
        if msg.command == "PING":
            self._write(f"PONG :{msg.trailing or 'tmi.twitch.tv'}")
            return
        if msg.command == "NOTICE" and "authentication failed" in msg.trailing.lower():
            logger.error("login rejected: %s", msg.trailing)
            return
        if msg.command == "RECONNECT":
            logger.warning("server requested reconnect; not supported, chat input will stop")
            return
        event = message_event_from_line(msg)
        if event is not None:
            sink(event)

    def _read_loop(self, sock: socket.socket, sink: EventSink) -> None:
        buf = b""
        while not self._closing.is_set():
            try:
                chunk = sock.recv(65536)
            except OSError as e:
                if not self._closing.is_set():
                    logger.error("chat connection lost: %s", e)
                return
            if not chunk:
                if not self._closing.is_set():
                    logger.error("chat connection closed by server")
                return
            buf += chunk
            while b"\r\n" in buf:
                line, buf = buf.split(b"\r\n", 1)
                try:
                    self.handle_line(line.decode("utf-8", errors="replace"), sink)
                except Exception:
                    logger.exception("failed to handle chat line")
            if len(buf) > _MAX_LINE:
                buf = b""
