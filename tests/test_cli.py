import json

from click.testing import CliRunner

from starchart.cli import create_policy, main
from starchart.classification import BodyKind, Classifier
from starchart.policies import CompositePolicy, DefaultPolicy


def invoke(*args):
    return CliRunner().invoke(main, [str(a) for a in args])


def test_create_policy(kerbol):
    classifier = Classifier()

    assert isinstance(create_policy(), DefaultPolicy)
    policy = create_policy(("Moon", "GasGiant"), solid_only=True)
    assert isinstance(policy, CompositePolicy)
    assert [b.name for b in kerbol if policy.accept(b, classifier)] == [
        "Mun",
        "Minmus",
        "Ike",
        "Laythe",
        "Vall",
    ]
    assert classifier.classify(kerbol.get("Jool")) is BodyKind.GAS_GIANT


def test_classify_command(system_file):
    result = invoke("--system", system_file(), "classify")

    assert result.exit_code == 0, result.output
    assert "Sun [Star]" in result.output
    assert "Kerbin: Terrestrial" in result.output


def test_classify_filters(system_file):
    result = invoke("--system", system_file(), "classify", "--kind", "Moon", "--solid")

    assert result.exit_code == 0, result.output
    assert "Mun: Moon" in result.output
    assert "Kerbin: Terrestrial" not in result.output


def test_programs_command(system_file):
    result = invoke("--system", system_file(), "programs", "--program", "MoonProgram")

    assert result.exit_code == 0, result.output
    assert "MoonProgram" in result.output
    assert "Minmus" in result.output


def test_programs_unknown_home(system_file):
    result = invoke("--system", system_file(), "programs", "--home", "Nowhere")

    assert result.exit_code == 1
    assert "Unknown body" in result.output


def test_expand_command(system_file, template_file, tmp_path):
    output = tmp_path / "records.json"

    result = invoke(
        "--system", system_file(), "expand", "--templates", template_file, "--output", output
    )

    assert result.exit_code == 0, result.output
    assert "Expanded 4 record(s)" in result.output
    assert len(json.loads(output.read_text(encoding="utf-8"))) == 4


def test_expand_disabled(system_file, template_file, tmp_path):
    output = tmp_path / "records.cfg"

    result = invoke(
        "--system", system_file(plugins={}), "expand", "--templates", template_file, "--output", output
    )

    assert result.exit_code == 0, result.output
    assert "Expansion disabled" in result.output
    assert not output.exists()


def test_expand_failure_exit_code(system_file, tmp_path):
    templates = tmp_path / "broken.cfg"
    templates.write_text(
        "STRATEGY_LEVEL_EXPAND\n{\n    name = Broken\n    factorSliderSteps = lots\n}\n",
        encoding="utf-8",
    )

    result = invoke("--system", system_file(), "expand", "--templates", templates)

    assert result.exit_code == 1
    assert "1 failure(s)" in result.output


def test_invalid_system_file(tmp_path):
    path = tmp_path / "system.json"
    path.write_text("{broken", encoding="utf-8")

    result = invoke("--system", path, "classify")

    assert result.exit_code == 1
    assert "Error loading input" in result.output
