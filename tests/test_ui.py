import pytest

from simpl_sh.ui import UIManager


@pytest.mark.parametrize(
    "category, title",
    [
        ("generic", "Error"),
        ("syntax", "Syntax Error"),
        ("not_found", "Not Found"),
        ("permission", "Permission Denied"),
        ("unheard_of", "Error"),
    ],
)
def test_error_panel_title_follows_category(console, output, category, title):
    UIManager(console).display_error("boom", category)
    text = output()
    assert title in text
    assert "boom" in text


def test_error_hint(console, output):
    UIManager(console).display_error("boom", hint="look closer")
    assert "look closer" in output()


def test_welcome_and_help(console, output):
    ui = UIManager(console)
    ui.show_welcome("9.9.9")
    ui.show_help()
    text = output()
    assert "Welcome" in text
    assert "9.9.9" in text
    assert "history --export FILE [bash|json]" in text
    assert "Alt+L" in text


def test_completion_listing(console, output):
    ui = UIManager(console)
    ui.display_completions([])
    assert "No completions" in output()
