from court_digest.tokens import SummaryContext, as_token, compile_message


def test_as_token() -> None:
    assert as_token("summary") == "{{summary}}"
    assert as_token("{{summary}}") == "{{summary}}"


def test_compile_replaces_every_occurrence() -> None:
    template = "{{club_name}}: {{summary}} / {{summary}}"
    compiled = compile_message(template, {"{{club_name}}": "Padel Norte", "summary": "3 courts"})
    assert compiled == "Padel Norte: 3 courts / 3 courts"


def test_unknown_tokens_survive() -> None:
    assert compile_message("Hi {{unknown}} {{sport}}", {"sport": "Padel"}) == "Hi {{unknown}} Padel"


def test_missing_template() -> None:
    assert compile_message(None, {"summary": "x"}) == ""
    assert compile_message("", {"summary": "x"}) == ""


def test_compile_is_idempotent_for_plain_values() -> None:
    replacements = {"summary": "Morning: 10am – 11am x1"}
    once = compile_message("{{summary}}", replacements)
    assert compile_message(once, replacements) == once


def test_summary_context_defaults() -> None:
    context = SummaryContext(summary="s", club_name="Club", date_display_short="Mon, Sep 29")
    replacements = context.replacements()
    assert replacements["{{sport}}"] == "Padel"
    assert replacements["{{count_slots}}"] == "0"
    assert replacements["{{message_content}}"] == ""
    assert compile_message("{{club_name}} {{date_display_short}}", replacements) == "Club Mon, Sep 29"
