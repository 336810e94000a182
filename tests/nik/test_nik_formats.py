from __future__ import annotations

from src.hr_payroll.hr_payroll.nik.factory import NikFormatFactory
from src.hr_payroll.hr_payroll.nik.formats.custom_literal import CustomLiteralFormat
from src.hr_payroll.hr_payroll.nik.formats.placeholder_template import PlaceholderTemplateFormat
from src.hr_payroll.hr_payroll.nik.formats.prefix_concat import PrefixConcatFormat
from src.hr_payroll.hr_payroll.nik.model import DepartmentNikConfig


def _config(**overrides):
    fields = dict(
        config_id=1,
        department_id=2,
        department_name="Operational",
        prefix="OPS",
        current_sequence=7,
        sequence_length=3,
        format_pattern="PREFIX + SEQUENCE",
    )
    fields.update(overrides)
    return DepartmentNikConfig(**fields)


def test_sentinel_pattern_concatenates_prefix_and_padded_sequence():
    cfg = _config()
    assert isinstance(cfg.nik_format, PrefixConcatFormat)
    assert cfg.render() == "OPS007"


def test_padding_never_truncates_longer_sequences():
    assert _config(current_sequence=12345).render() == "OPS12345"


def test_placeholder_substitution_is_order_independent():
    forward = _config(prefix="HR", current_sequence=1, format_pattern="{prefix}-{sequence}")
    backward = _config(prefix="HR", current_sequence=1, format_pattern="{sequence}/{prefix}")
    assert forward.render() == "HR-001"
    assert backward.render() == "001/HR"


def test_placeholder_does_not_resubstitute_inside_prefix():
    fmt = PlaceholderTemplateFormat("{prefix}{sequence}")
    assert fmt.render("A{sequence}", "01") == "A{sequence}01"


def test_factory_resolves_pattern_kinds():
    factory = NikFormatFactory()
    assert isinstance(factory.for_pattern("PREFIX + SEQUENCE"), PrefixConcatFormat)
    assert isinstance(factory.for_pattern("{prefix}.{sequence}"), PlaceholderTemplateFormat)

    fallback = factory.for_pattern("anything else")
    assert isinstance(fallback, CustomLiteralFormat)
    assert fallback.raw == "anything else"
    assert isinstance(factory.for_pattern(None), CustomLiteralFormat)


def test_custom_literal_behaves_like_concatenation():
    cfg = _config(format_pattern="NIK-KARYAWAN")
    assert cfg.nik_format.kind == "custom_literal"
    assert cfg.render() == "OPS007"


def test_regex_escapes_prefix_and_pins_digit_count():
    fmt = PrefixConcatFormat()
    assert fmt.matches("A.B001", "A.B", 3)
    assert not fmt.matches("AXB001", "A.B", 3)
    assert not fmt.matches("A.B01", "A.B", 3)

    tmpl = PlaceholderTemplateFormat("{prefix}-{sequence}")
    assert tmpl.matches("HR-004", "HR", 3)
    assert not tmpl.matches("HR004", "HR", 3)


def test_example_uses_sequence_one():
    assert PlaceholderTemplateFormat("{prefix}-{sequence}").example("FIN", 4) == "FIN-0001"
