import pytest
from pydantic import ValidationError

from exemel.config import Settings


def test_defaults():
    settings = Settings()
    assert settings.indent == "  "
    assert settings.synthetic_root_name == "Root"
    assert settings.status_parsed == "XML parsed correctly"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("EXEMEL_INDENT_SIZE", "4")
    monkeypatch.setenv("EXEMEL_SYNTHETIC_ROOT_NAME", "Fragments")
    settings = Settings()
    assert settings.indent == "    "
    assert settings.synthetic_root_name == "Fragments"


@pytest.mark.parametrize("name", ["", "1abc", "has space", "xmlThing", "<Root>"])
def test_rejects_unusable_root_names(name):
    with pytest.raises(ValidationError):
        Settings(synthetic_root_name=name)


def test_rejects_negative_indent():
    with pytest.raises(ValidationError):
        Settings(indent_size=-1)
