import unittest
from unittest.mock import Mock, patch

from statuscheck.formatting import JSON_DECORATOR
from statuscheck.main import (
    HEALTHCHECK_PATH,
    PINGDOM_XML_PATH,
    direct_report,
    status_check,
    wrap,
)


class WrapRoutingTests(unittest.TestCase):
    def setUp(self) -> None:
        self.checks = {"db": "http://db.local"}
        self.handler = Mock(return_value={"statusCode": 200, "body": "hello"})

    def test_pingdom_path_reports_without_calling_handler(self) -> None:
        with patch("statuscheck.main.report", return_value={"statusCode": 200}) as mock_report:
            result = wrap(self.handler, self.checks)({"__ow_path": PINGDOM_XML_PATH})

        self.handler.assert_not_called()
        mock_report.assert_called_once_with(self.checks)
        self.assertEqual(result, {"statusCode": 200})

    def test_healthcheck_path_reports_json(self) -> None:
        with patch("statuscheck.main.report", return_value={"statusCode": 200}) as mock_report:
            wrap(self.handler, self.checks)({"__ow_path": HEALTHCHECK_PATH})

        self.handler.assert_not_called()
        mock_report.assert_called_once_with(self.checks, 10000, JSON_DECORATOR)

    def test_other_paths_delegate_unchanged(self) -> None:
        params = {"__ow_path": "/api/things", "q": "x"}
        with patch("statuscheck.main.report") as mock_report:
            result = wrap(self.handler, self.checks)(params)

        mock_report.assert_not_called()
        self.handler.assert_called_once_with(params)
        self.assertIs(result, self.handler.return_value)

    def test_missing_params_delegate(self) -> None:
        with patch("statuscheck.main.report") as mock_report:
            wrap(self.handler, self.checks)(None)

        mock_report.assert_not_called()
        self.handler.assert_called_once_with(None)

    def test_wrap_rejects_non_callable(self) -> None:
        with self.assertRaises(TypeError):
            wrap({"db": "http://db.local"}, {})

    def test_decorator_form(self) -> None:
        @status_check({"db": "http://db.local"})
        def action(params):
            return {"body": params["name"]}

        self.assertEqual(action({"name": "x"}), {"body": "x"})
        self.assertEqual(action.__name__, "action")
        with patch("statuscheck.main.report", return_value={"statusCode": 200}) as mock_report:
            action({"__ow_path": PINGDOM_XML_PATH})
        mock_report.assert_called_once_with({"db": "http://db.local"})


class DirectReportTests(unittest.TestCase):
    def test_params_are_the_checks(self) -> None:
        params = {"db": "http://db.local"}
        with patch("statuscheck.main.report", return_value={"statusCode": 200}) as mock_report:
            direct_report(params)

        mock_report.assert_called_once_with(params)

    def test_rejects_non_mapping(self) -> None:
        with self.assertRaises(TypeError):
            direct_report("http://db.local")


if __name__ == "__main__":
    unittest.main()
