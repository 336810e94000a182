from __future__ import annotations

import pytest

from src.hr_payroll.hr_payroll.core.exceptions import ConflictError, NotConfiguredError, NotFoundError, ValidationError
from src.hr_payroll.hr_payroll.nik.service import NikService, fallback_nik


@pytest.fixture
def service(nik_configs, departments, fixed_now):
    return NikService(nik_configs, departments, now=lambda: fixed_now)


def test_generate_next_issues_current_and_advances(service, nik_configs, departments):
    ops = departments.get_by_name("Operational")
    config_id = nik_configs.add(ops, "OPS", current_sequence=7)

    issued = service.generate_next(ops.department_id)

    assert issued.nik == "OPS007"
    assert issued.config.current_sequence == 8
    assert nik_configs.get_by_id(config_id).current_sequence == 8
    assert service.generate_next(ops.department_id).nik == "OPS008"


def test_department_without_config_uses_default(service, nik_configs, departments):
    nik_configs.add(departments.get_by_name("General"), "GEN", current_sequence=3)
    finance = departments.get_by_name("Finance")

    assert service.generate_next(finance.department_id).nik == "GEN003"
    assert service.generate_next_for_department_name("Finance").nik == "GEN004"


def test_no_config_anywhere_is_not_configured(service, departments):
    with pytest.raises(NotConfiguredError):
        service.generate_next(departments.get_by_name("Finance").department_id)


def test_assign_for_employee_degrades_to_timestamp_nik(service, fixed_now):
    nik = service.assign_for_employee(None)
    assert nik == fallback_nik(fixed_now)
    assert nik.startswith("EMP")
    assert len(nik) == 9
    assert nik[3:] == str(int(fixed_now.timestamp() * 1000))[-6:]


def test_inactive_config_is_ignored(service, nik_configs, departments):
    ops = departments.get_by_name("Operational")
    nik_configs.add(ops, "OPS", is_active=False)
    nik_configs.add(departments.get_by_name("General"), "GEN")

    assert service.generate_next(ops.department_id).nik == "GEN001"


@pytest.mark.parametrize(
    "nik_input, expected",
    [("OPS003", True), ("OPS19003", True), ("OPS3", False), ("ABC003", False)],
)
def test_validate_format_accepts_legacy_operational_formats(service, nik_configs, departments, nik_input, expected):
    nik_configs.add(departments.get_by_name("Operational"), "OPS19")

    result = service.validate_format(nik_input, "Operational")

    assert result["is_valid"] is expected
    assert result["expected_format"] == "OPS001 atau OPS19001"
    assert result["actual_input"] == nik_input


def test_validate_format_for_template_department(service, nik_configs, departments):
    nik_configs.add(departments.get_by_name("Finance"), "FIN", sequence_length=4, format_pattern="{prefix}-{sequence}")

    assert service.validate_format("FIN-0042", "Finance")["is_valid"] is True
    assert service.validate_format("FIN0042", "Finance")["is_valid"] is False
    assert service.validate_format("FIN0042", "Finance")["expected_format"] == "FIN-0001"


def test_check_reports_missing_config(service, departments):
    result = service.check("finance")
    assert result["has_config"] is False
    assert result["nik_config"] is None
    assert result["department"]["name"] == "Finance"

    assert service.check("Marketing") == {"department": None, "nik_config": None, "has_config": False}


def test_create_config_defaults_and_duplicates(service, departments):
    finance = departments.get_by_name("Finance")
    cfg = service.create_config(department_id=finance.department_id, prefix="FIN")

    assert cfg.current_sequence == 1
    assert cfg.sequence_length == 3
    assert cfg.format_pattern == "PREFIX + SEQUENCE"
    assert cfg.department_name == "Finance"

    with pytest.raises(ConflictError):
        service.create_config(department_id=finance.department_id, prefix="FN")


def test_create_config_rejects_bad_sequence_length(service, departments):
    with pytest.raises(ValidationError):
        service.create_config(department_id=departments.get_by_name("Finance").department_id, prefix="F", sequence_length=0)


def test_update_config_cannot_lower_sequence(service, nik_configs, departments):
    config_id = nik_configs.add(departments.get_by_name("Operational"), "OPS", current_sequence=10)

    with pytest.raises(ValidationError):
        service.update_config(config_id, {"current_sequence": 5})

    updated = service.update_config(config_id, {"current_sequence": 20, "prefix": "OP"})
    assert updated.render() == "OP020"


def test_delete_config_blocked_while_employees_hold_niks(service, nik_configs, departments):
    ops = departments.get_by_name("Operational")
    config_id = nik_configs.add(ops, "OPS")
    nik_configs.employees_with_nik[ops.department_id] = 2

    with pytest.raises(ConflictError):
        service.delete_config(config_id)

    nik_configs.employees_with_nik[ops.department_id] = 0
    service.delete_config(config_id)
    assert nik_configs.get_by_id(config_id) is None


def test_validate_format_needs_the_departments_own_config(service, nik_configs, departments):
    nik_configs.add(departments.get_by_name("Operational"), "OPS19")
    nik_configs.add(departments.get_by_name("General"), "GEN")

    with pytest.raises(NotConfiguredError):
        service.validate_format("OPS003", "Finance")
    with pytest.raises(NotFoundError):
        service.validate_format("OPS19003", "Marketing")


def test_validate_format_legacy_table_follows_requested_department(service, nik_configs, departments):
    nik_configs.add(departments.get_by_name("General"), "GEN")

    result = service.validate_format("OPS003", "General")

    assert result["is_valid"] is False
    assert result["expected_format"] == "GEN001"


@pytest.mark.parametrize("flag, expected", [("false", False), ("0", False), (0, False), ("true", True), (True, True)])
def test_is_active_flag_is_parsed_explicitly(service, departments, flag, expected):
    cfg = service.create_config(department_id=departments.get_by_name("Finance").department_id, prefix="FIN", is_active=flag)
    assert cfg.is_active is expected


def test_is_active_rejects_garbage(service, nik_configs, departments):
    config_id = nik_configs.add(departments.get_by_name("Finance"), "FIN")
    with pytest.raises(ValidationError):
        service.update_config(config_id, {"is_active": "maybe"})
    assert service.update_config(config_id, {"is_active": "false"}).is_active is False
