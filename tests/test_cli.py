import json

from smartfill import cli
from smartfill.config import AppConfig
from smartfill.container import Container
from smartfill.domain.errors import ProviderRequestError
from smartfill.ports.providers import (
    FlightProviderPort,
    PlaceProviderPort,
    TrainProviderPort,
)

from conftest import FakeProvider


def _use(monkeypatch, provider):
    container = Container.create_default(AppConfig())
    for port in (FlightProviderPort, TrainProviderPort, PlaceProviderPort):
        container.register(port, lambda: provider)
    monkeypatch.setattr(cli, "get_container", lambda: container)
    monkeypatch.setattr(cli, "configure_logging", lambda: None)


def test_lookup_prints_input_and_suggestion(monkeypatch, capsys, provider, suggestion):
    _use(monkeypatch, provider)

    code = cli.main(["lookup", "UA 120", "2025-03-01"])

    out = json.loads(capsys.readouterr().out)
    assert code == 0
    assert out["input"] == {"type": "flight", "query": "UA 120", "date": "2025-03-01"}
    assert out["suggestion"] == suggestion.to_dict()
    assert provider.calls == [("flight", "UA 120", "2025-03-01")]


def test_lookup_place_with_context(monkeypatch, capsys, provider):
    _use(monkeypatch, provider)

    cli.main(["lookup", "Hotel Lutetia", "--type", "hotel", "--lat", "48.85", "--lng", "2.33"])

    out = json.loads(capsys.readouterr().out)
    assert out["input"]["context"] == {"lat": "48.85", "lng": "2.33"}
    assert provider.calls[0][3].has_point


def test_lookup_not_found_prints_null(monkeypatch, capsys):
    _use(monkeypatch, FakeProvider(result=None))

    code = cli.main(["lookup", "ZZ999"])

    assert code == 0
    assert json.loads(capsys.readouterr().out)["suggestion"] is None


def test_lookup_provider_error_exits_non_zero(monkeypatch, capsys):
    _use(monkeypatch, FakeProvider(error=ProviderRequestError("bad flight number")))

    code = cli.main(["lookup", "UA120"])

    assert code == 1
    assert "bad flight number" in capsys.readouterr().err


def test_lookup_invalid_query(monkeypatch, capsys, provider):
    _use(monkeypatch, provider)

    assert cli.main(["lookup", "U"]) == 2
    assert provider.calls == []


def test_lookup_unreadable_date(monkeypatch, capsys, provider):
    _use(monkeypatch, provider)

    assert cli.main(["lookup", "UA120", "xyzzy plover"]) == 2
    assert "xyzzy plover" in capsys.readouterr().err
    assert provider.calls == []
