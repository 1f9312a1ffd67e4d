import pytest

from pihal.core.board import (
    BoardRegistry,
    create_board,
    get_board,
    list_available_boards,
    register_board,
    verify_boards_registered,
)


class DummyBoard:
    def __init__(self, **kwargs):
        self.kwargs = kwargs


def test_board_registry_basic_operations():
    registry = BoardRegistry()
    registry.register("dummy", DummyBoard)
    assert registry.get("dummy") is DummyBoard
    assert registry.list_boards() == ["dummy"]

    instance = registry.create("dummy", loop=1)
    assert isinstance(instance, DummyBoard)
    assert instance.kwargs == {"loop": 1}

    with pytest.raises(ValueError):
        registry.register("dummy", DummyBoard)

    with pytest.raises(ValueError, match="Available"):
        registry.get("missing")


def test_global_registry_functions(monkeypatch):
    registry = BoardRegistry()
    monkeypatch.setattr("pihal.core.board._REGISTRY", registry)

    register_board("dummy", DummyBoard)
    assert get_board("dummy") is DummyBoard
    assert list_available_boards() == ["dummy"]
    instance = create_board("dummy", window_factory=None)
    assert isinstance(instance, DummyBoard)
    assert instance.kwargs == {"window_factory": None}


def test_verify_boards_registered(monkeypatch):
    registry = BoardRegistry()
    monkeypatch.setattr("pihal.core.board._REGISTRY", registry)

    with pytest.raises(RuntimeError):
        verify_boards_registered()

    registry.register("dummy", DummyBoard)
    verify_boards_registered()


def test_bundled_variants_registered_on_import():
    # importing any pihal module runs the package init, which registers them
    verify_boards_registered()
    assert {"rpi_b_rev1", "rpi_b_plus", "rpi_zero", "rpi2_b", "rpi3_b"} <= set(
        list_available_boards()
    )
