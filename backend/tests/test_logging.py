import json

from payslip_api.core.logging import configure_logging, get_logger
from payslip_api.domains.payslips import store


def test_module_logger_writes_json_with_its_name(capfd):
    configure_logging("INFO")

    store.logger.info("payslip_store_opened", url="sqlite://")

    line = capfd.readouterr().out.strip().splitlines()[-1]
    event = json.loads(line)
    assert event["event"] == "payslip_store_opened"
    assert event["logger_name"] == "payslip_api.domains.payslips.store"
    assert event["level"] == "info"
    assert "timestamp" in event


def test_level_filters_lower_events(capfd):
    configure_logging("WARNING")
    try:
        get_logger("payslip_api.tests").info("quiet")
        get_logger("payslip_api.tests").warning("loud")
    finally:
        configure_logging("INFO")

    out = capfd.readouterr().out
    assert "quiet" not in out
    assert "loud" in out
