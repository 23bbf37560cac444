"""Menu screens with the prompt_toolkit dialogs replaced by canned answers."""

import pytest
from prompt_toolkit.document import Document
from prompt_toolkit.validation import ValidationError

from core import navigation
from scripts.licensing import LicensingError
from scripts.product_key import ProductKey
from tests.support import PRODUCT_KEY, FakeLicensing, make_record
from utilities.licensing import activate, status
from utilities.licensing.activate import ActivateKey, key_validator
from utilities.licensing.status import LicenseStatusView


@pytest.fixture(autouse=True)
def back_button(monkeypatch):
    monkeypatch.setattr(navigation, "choice", lambda **kwargs: None)


@pytest.fixture
def moves():
    return []


def started(node, moves):
    node.start(lambda next_node: moves.append(next_node), lambda: moves.append("back"))
    return node


@pytest.fixture
def activations(monkeypatch):
    calls = []
    monkeypatch.setattr(activate, "run_activation", lambda product_key, log_file: calls.append((product_key, log_file)))
    return calls


def answer(monkeypatch, *texts, confirm=True):
    answers = iter(texts)
    monkeypatch.setattr(activate, "prompt", lambda message, **kwargs: next(answers))
    monkeypatch.setattr(activate, "choice", lambda **kwargs: confirm)


def test_activate_forwards_key_and_log_file(monkeypatch, tmp_path, activations, moves):
    answer(monkeypatch, f"  {PRODUCT_KEY.lower()} ", str(tmp_path / "menu.log"))

    started(ActivateKey(), moves).process()

    assert activations == [(ProductKey(PRODUCT_KEY), str(tmp_path / "menu.log"))]
    assert moves == ["back"]


def test_activate_with_empty_log_file_uses_default(monkeypatch, activations, moves):
    answer(monkeypatch, PRODUCT_KEY, "   ")

    started(ActivateKey(), moves).process()

    assert activations == [(ProductKey(PRODUCT_KEY), None)]


def test_activate_cancelled(monkeypatch, activations, moves):
    answer(monkeypatch, PRODUCT_KEY, "a.log", confirm=False)

    started(ActivateKey(), moves).process()

    assert activations == []
    assert moves == ["back"]


@pytest.mark.parametrize("text", [PRODUCT_KEY, PRODUCT_KEY.lower(), f" {PRODUCT_KEY} "])
def test_key_validator_accepts(text):
    key_validator.validate(Document(text))


@pytest.mark.parametrize("text", ["", "ABCDE-FGHIJ", "ABCDE-FGHIJ-KLMNO-PQRST-UVW1\u212a"])
def test_key_validator_rejects(text):
    with pytest.raises(ValidationError):
        key_validator.validate(Document(text))


def test_status_lists_installed_products(monkeypatch, capsys, moves):
    licensing = FakeLicensing(before=[
        make_record(1, name="Windows(R), Professional edition"),
        make_record(5, reason=-1073418124, partial_key="3V66T", name="Office 16, Professional Plus"),
    ])
    monkeypatch.setattr(status, "default_licensing", lambda: licensing)

    started(LicenseStatusView(), moves).process()

    out = capsys.readouterr().out
    assert "Windows(R), Professional edition" in out
    assert "Licensed" in out
    assert "3V66T" in out
    assert "Notification (Not Activated)" in out
    assert out.count("Reason:") == 1
    assert "0xC004F074" in out
    assert moves == ["back"]


def test_status_without_products(monkeypatch, capsys, moves):
    monkeypatch.setattr(status, "default_licensing", lambda: FakeLicensing())

    started(LicenseStatusView(), moves).process()

    assert "No product keys installed." in capsys.readouterr().out


def test_status_query_error(monkeypatch, capsys, moves):
    licensing = FakeLicensing(query_error=LicensingError("Query SoftwareLicensingProduct", "Access denied"))
    monkeypatch.setattr(status, "default_licensing", lambda: licensing)

    started(LicenseStatusView(), moves).process()

    assert "Could not query licensing status: Access denied" in capsys.readouterr().out
    assert moves == ["back"]
