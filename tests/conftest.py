"""Fixtures pytest communes."""
import pytest
from pathlib import Path

from dualcues.core.models import Cue

# Répertoire des fixtures
FIXTURES_DIR = Path(__file__).resolve().parent / "fixtures"


@pytest.fixture
def fixtures_dir():
    return FIXTURES_DIR


@pytest.fixture
def scene_en() -> list[Cue]:
    """Piste primaire (anglais) d'une courte scène."""
    return [
        Cue(1.0, 3.0, "Where are you going?"),
        Cue(3.5, 5.0, "To the station."),
        Cue(6.0, 8.0, "Wait for me!"),
        Cue(12.0, 14.0, "I'm sorry."),
        Cue(20.0, 22.0, "Thank you."),
    ]


@pytest.fixture
def scene_fr() -> list[Cue]:
    """Piste secondaire (français), dans un ordre non trié et avec une cue en trop."""
    return [
        Cue(3.6, 5.2, "À la gare."),
        Cue(0.9, 3.1, "Où vas-tu ?"),
        Cue(6.1, 7.9, "Attends-moi !"),
        Cue(15.0, 16.0, "Quoi ?"),
        Cue(12.2, 13.8, "Désolé."),
        Cue(30.0, 31.0, "Merci."),
    ]
