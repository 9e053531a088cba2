import pytest

from klondike.controller import GameController
from klondike.dealer import Dealer
from klondike.settings import default_settings


@pytest.fixture
def controller() -> GameController:
    return GameController(default_settings(), Dealer(seed=1))


@pytest.fixture
def easy_game(controller: GameController) -> GameController:
    controller.new_game("easy", seed=1)
    return controller
