import pytest

from vaccinate import DEFAULT_DEPENDENCIES_PROPERTY, Defaults, FunctionLoader, Options, default_loader
from vaccinate.configuration import overridden_defaults, reset


@pytest.fixture
def local_defaults() -> Defaults:
    return Defaults(module_dir="/srv/app")


def test_merge_fills_missing_options_from_defaults(local_defaults):
    options = local_defaults.merge({"dependencies_property": "inject"})

    assert options == Options("inject", "/srv/app", default_loader)


def test_merge_keeps_explicit_none(local_defaults):
    assert local_defaults.merge({"module_dir": None}).module_dir is None


def test_merge_wraps_plain_functions(local_defaults):
    def loader(reference, options):
        return reference

    local_defaults.loader = loader
    merged = local_defaults.merge()

    assert isinstance(merged.loader, FunctionLoader)
    assert merged.loader.func is loader


def test_merge_takes_a_snapshot(local_defaults):
    options = local_defaults.merge()
    local_defaults.module_dir = ["/srv/other"]

    assert options.module_dir == "/srv/app"


def test_overriding_a_local_defaults_instance(local_defaults):
    with overridden_defaults(local_defaults, module_dir=None, dependencies_property="inject"):
        assert local_defaults.module_dir is None
        assert local_defaults.dependencies_property == "inject"

    assert local_defaults.module_dir == "/srv/app"
    assert local_defaults.dependencies_property == DEFAULT_DEPENDENCIES_PROPERTY


def test_overriding_unknown_options_fails(local_defaults):
    with pytest.raises(ValueError):
        with overridden_defaults(local_defaults, require=None):
            pass

    assert not hasattr(local_defaults, "require")


def test_reset(local_defaults):
    local_defaults.loader = print
    reset(local_defaults)

    assert local_defaults == Defaults()
