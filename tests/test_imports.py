def test_import_delve_package() -> None:
    import importlib

    module = importlib.import_module("delve")
    assert module is not None
    assert importlib.import_module("delve.services") is not None


def test_import_rng_no_side_effects() -> None:
    from delve.core.rng import RNG

    rng = RNG(42)
    value = rng.randint(0, 1)
    assert value in (0, 1)
