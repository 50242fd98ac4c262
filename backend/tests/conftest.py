from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from tlshare.config import settings
from tlshare.models import (
    CharacterOption,
    OptionCatalog,
    SummonOption,
    Timeline,
    WeaponOption,
)
from tlshare.services.timeline import TimelineService


@pytest.fixture
def catalog() -> OptionCatalog:
    return OptionCatalog(
        characters=[
            CharacterOption(name="Alpha", alias="A", type="AR", unique_key_options=["ka1", "ka2", "ka3"]),
            CharacterOption(name="Bravo", alias="B", type="SMG", unique_key_options=["kb1", "kb2"]),
            CharacterOption(name="Charlie", type="AR", unique_key_options=["ka1", "kc1"]),
        ],
        weapons=[
            WeaponOption(name="W-AR1", type="AR"),
            WeaponOption(name="W-AR2", type="AR"),
            WeaponOption(name="W-SMG1", type="SMG"),
        ],
        common_keys=["ck1", "ck2", "ck3"],
        summons=[
            SummonOption(name="Turret (X)", alias="Turret"),
            SummonOption(name="Drone"),
        ],
    )


@pytest.fixture
def service(catalog: OptionCatalog) -> TimelineService:
    return TimelineService(catalog=catalog, default_title="新規TL")


@pytest.fixture
def timeline(service: TimelineService) -> Timeline:
    return service.default_timeline()


@pytest.fixture
def client(tmp_path: Path, monkeypatch):
    from tlshare.app import create_app

    monkeypatch.setattr(settings, "CACHE_DATABASE_PATH", str(tmp_path / "tl_cache.db"))
    with TestClient(create_app()) as test_client:
        yield test_client
