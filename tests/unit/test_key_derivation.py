from __future__ import annotations

from dataclasses import dataclass, field

from configurator import build_catalog, embed, setting


@dataclass
class Leaf:
    c: str = setting("env,flag", default="")
    custom: str = setting("env=CUSTOM_KEY,flag=custom-flag", default="")
    plain: str = ""


@dataclass
class Middle:
    b: Leaf = field(default_factory=Leaf)


@dataclass
class Top:
    a: Middle = field(default_factory=Middle)


@dataclass
class Base:
    MaxConns: int = setting("env,flag,default=10", default=0)


@dataclass
class Pool:
    base: Base = embed(Base)
    idle: int = setting("env,flag", default=0)


@dataclass
class Outer:
    pool: Pool = field(default_factory=Pool)


def test_derived_keys_join_the_nesting_path() -> None:
    catalog = build_catalog(Top())
    leaf = catalog.find("a", "b", "c")

    assert leaf is not None
    assert leaf.environment_key() == "A_B_C"
    assert leaf.flag_key() == "a-b-c"


def test_explicit_keys_ignore_the_nesting_path() -> None:
    custom = build_catalog(Top()).find("a", "b", "custom")

    assert custom is not None
    assert custom.environment_key() == "CUSTOM_KEY"
    assert custom.flag_key() == "custom-flag"


def test_fields_without_directives_have_empty_keys() -> None:
    plain = build_catalog(Top()).find("a", "b", "plain")

    assert plain is not None
    assert plain.environment_key() == ""
    assert plain.flag_key() == ""
    assert plain.default_value() == ""


def test_parent_chain_follows_declared_fields() -> None:
    leaf = build_catalog(Top())[0]

    assert leaf.parent is not None and leaf.parent.name == "b"
    assert leaf.parent.parent is not None and leaf.parent.parent.name == "a"
    assert leaf.parent.parent.parent is None


def test_embedded_fields_attach_to_the_embedding_parent() -> None:
    catalog = build_catalog(Outer())
    max_conns, idle = catalog[0], catalog[1]

    assert max_conns.path() == ["pool", "MaxConns"]
    assert max_conns.environment_key() == "POOL_MAXCONNS"
    assert max_conns.flag_key() == "pool-maxconns"
    assert max_conns.default_value() == "10"
    assert max_conns.parent is idle.parent
    assert max_conns.enclosing is not None and max_conns.enclosing.transparent


def test_keys_are_recomputed_on_every_call() -> None:
    leaf = build_catalog(Top())[0]

    assert leaf.environment_key() == leaf.environment_key()
    leaf.directives.env = "OVERRIDDEN"
    assert leaf.environment_key() == "OVERRIDDEN"


def test_descriptor_to_dict() -> None:
    leaf = build_catalog(Top())[0]

    assert leaf.to_dict() == {
        "name": "c",
        "path": ["a", "b", "c"],
        "type": "str",
        "kind": "string",
        "env": "A_B_C",
        "flag": "a-b-c",
        "default": "",
        "has_default": False,
    }


def test_catalog_lookups_by_key() -> None:
    catalog = build_catalog(Outer())

    by_env = catalog.by_environment_key()
    by_flag = catalog.by_flag_key()

    assert set(by_env) == {"POOL_MAXCONNS", "POOL_IDLE"}
    assert by_flag["pool-idle"].name == "idle"
    assert catalog.find("pool", "missing") is None
    assert [entry["env"] for entry in catalog.to_dict()["fields"]] == ["POOL_MAXCONNS", "POOL_IDLE"]
