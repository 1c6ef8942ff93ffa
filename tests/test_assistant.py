"""Tests for assistant prompt building."""
from core.envai.assistant import NO_DATA_RESPONSE, build_prompt


def test_prompt_includes_context_and_question():
    prompt = build_prompt("Why is my bill high?", "CURRENT STATUS:\n- Mode: heating", "7d")

    assert "Context Data for 7d:" in prompt
    assert "CURRENT STATUS:\n- Mode: heating" in prompt
    assert "User Question: Why is my bill high?" in prompt
    assert prompt.endswith("Answer:")


def test_prompt_keeps_braces_in_question():
    prompt = build_prompt("What does {mode} mean?", "context", "24h")
    assert "What does {mode} mean?" in prompt


def test_no_data_response_is_html():
    assert NO_DATA_RESPONSE.startswith('<div class="ai-no-data">')
    assert NO_DATA_RESPONSE.endswith("</div>")
