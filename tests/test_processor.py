import json
import logging

import pytest

from starchart.classification import BodyKind
from starchart.confignode import load_config_file
from starchart.processor import ExpansionProcessor


def test_classify_bodies(system_file):
    with ExpansionProcessor(system_file()) as processor:
        kinds = processor.classify_bodies()

    assert kinds["Kerbin"] is BodyKind.TERRESTRIAL
    assert kinds["Jool"] is BodyKind.GAS_GIANT
    assert kinds["Laythe"] is BodyKind.MOON
    assert processor.format_tree().startswith("Sun [Star]")


def test_resolve_program_with_home(system_file):
    with ExpansionProcessor(system_file()) as processor:
        default = [b.name for b in processor.resolve_program("MoonProgram")]
        laythe = [b.name for b in processor.resolve_program("KerbinProgram", home="Laythe")]

        with pytest.raises(ValueError, match="Unknown body"):
            processor.resolve_program("KerbinProgram", home="Nowhere")

    assert default == ["Mun", "Minmus"]
    assert laythe == ["Laythe"]


def test_expand_and_export_json(system_file, template_file, tmp_path):
    output = tmp_path / "out" / "records.json"

    with ExpansionProcessor(system_file(), [template_file]) as processor:
        records, report = processor.expand()
        processor.export_results(records, output)

    assert report.records == 4
    data = json.loads(output.read_text(encoding="utf-8"))
    assert [r["unique_name"] for r in data] == ["MoonProgram0", "MoonProgram1", "Outreach0", "Outreach1"]
    assert data[0]["selector"] == "Mun"
    assert data[0]["record"]["values"]["title"] == "Mun Program"
    assert data[0]["record"]["nodes"][0]["values"]["body"] == "Mun"


def test_export_cfg(system_file, template_file, tmp_path):
    output = tmp_path / "records.cfg"

    with ExpansionProcessor(system_file(), [template_file]) as processor:
        records, _ = processor.expand()
        processor.export_results(records, output)

    text = output.read_text(encoding="utf-8")
    assert text.startswith("// MoonProgram0\n")
    assert "// Outreach0\n" in text

    strategies = load_config_file(output).get_nodes("STRATEGY")
    assert [s.get_value("name") for s in strategies] == [
        "MoonProgram0",
        "MoonProgram1",
        "Outreach1",
        "Outreach2",
    ]


def test_export_unknown_format(system_file, tmp_path):
    with ExpansionProcessor(system_file()) as processor:
        with pytest.raises(ValueError, match="Unknown format"):
            processor.export_results([], tmp_path / "records.txt", fmt="yaml")


def test_expansion_disabled_without_required_plugin(system_file, template_file):
    with ExpansionProcessor(system_file(plugins={}), [template_file]) as processor:
        records, report = processor.expand()

    assert records == []
    assert report.disabled_reason is not None


def test_each_expand_starts_counters_over(system_file, template_file):
    with ExpansionProcessor(system_file(), [template_file]) as processor:
        first, _ = processor.expand()
        second, _ = processor.expand()

    assert [r.unique_name for r in first] == [r.unique_name for r in second]


def test_invalid_system_file(tmp_path):
    path = tmp_path / "system.json"
    path.write_text("[]", encoding="utf-8")

    with pytest.raises(ValueError):
        ExpansionProcessor(path)


def test_each_expand_logs_program_sets_again(system_file, template_file, caplog):
    with ExpansionProcessor(system_file(), [template_file]) as processor:
        with caplog.at_level(logging.INFO, logger="starchart.programs"):
            processor.expand()
            processor.expand()

    messages = [r.getMessage() for r in caplog.records]
    assert messages.count('Program MoonProgram: "Mun", "Minmus"') == 2
    assert sum(m.startswith("System roots:") for m in messages) == 2
