import os
import unittest


class TestCliEnvBoolParsing(unittest.TestCase):
    def test_env_flag_parses_falsey_strings(self) -> None:
        from joelbot.cli import _env_flag

        old = os.environ.get("JOELBOT_DRY_RUN")
        try:
            os.environ["JOELBOT_DRY_RUN"] = "false"
            self.assertFalse(_env_flag("JOELBOT_DRY_RUN"))
            os.environ["JOELBOT_DRY_RUN"] = "0"
            self.assertFalse(_env_flag("JOELBOT_DRY_RUN"))
            os.environ["JOELBOT_DRY_RUN"] = "off"
            self.assertFalse(_env_flag("JOELBOT_DRY_RUN"))
            os.environ["JOELBOT_DRY_RUN"] = "true"
            self.assertTrue(_env_flag("JOELBOT_DRY_RUN"))
            os.environ.pop("JOELBOT_DRY_RUN", None)
            self.assertFalse(_env_flag("JOELBOT_DRY_RUN"))
            self.assertTrue(_env_flag("JOELBOT_DRY_RUN", default=True))
        finally:
            if old is None:
                os.environ.pop("JOELBOT_DRY_RUN", None)
            else:
                os.environ["JOELBOT_DRY_RUN"] = old

    def test_coerce_helpers(self) -> None:
        from joelbot.util.conv import coerce_bool, coerce_str_list

        self.assertTrue(coerce_bool("YES"))
        self.assertFalse(coerce_bool("nope", default=False))
        self.assertTrue(coerce_bool("nope", default=True))
        self.assertEqual(coerce_str_list(" a, ,b "), ["a", "b"])
        self.assertEqual(coerce_str_list(["x", None, 3]), ["x", "3"])


if __name__ == "__main__":
    unittest.main()
