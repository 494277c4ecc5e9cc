from court_digest.config import Settings


def test_settings_defaults() -> None:
    settings = Settings(_env_file=None)
    assert settings.playtomic_offset_minutes == 60
    assert settings.sport == "Padel"
    assert settings.playtomic_endpoint("matches") == "https://api.playtomic.io/v1/matches"


def test_settings_read_prefixed_environment(monkeypatch) -> None:
    monkeypatch.setenv("COURT_DIGEST_CLUB_NAME", "Padel Norte")
    monkeypatch.setenv("COURT_DIGEST_WHATSAPP_GROUPS", "Members, Juniors ,")
    monkeypatch.setenv("COURT_DIGEST_PLAYTOMIC_OFFSET_MINUTES", "120")
    settings = Settings(_env_file=None)
    assert settings.club_name == "Padel Norte"
    assert settings.whatsapp_groups == ["Members", "Juniors"]
    assert settings.playtomic_offset_minutes == 120
