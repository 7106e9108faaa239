"""Test public API surface - ensure imports work correctly and no side effects."""


def test_root_exports():
    import yamldb

    for name in yamldb.__all__:
        assert hasattr(yamldb, name), name


def test_root_exports_match_modules():
    """Root aliases are the objects defined in the stable modules."""
    import yamldb
    from yamldb.kernel.loader import YamlDatabase
    from yamldb.kernel.store import TypesafeYamlDatabase
    from yamldb.contracts import LoadResult, ParseResult

    assert yamldb.YamlDatabase is YamlDatabase
    assert yamldb.TypesafeYamlDatabase is TypesafeYamlDatabase
    assert yamldb.LoadResult is LoadResult
    assert yamldb.ParseResult is ParseResult


def test_every_field_type_has_an_accessor():
    """Each primitive type is reachable as a module function and a loader method."""
    from yamldb.kernel import fields
    from yamldb.kernel.fields import FieldType
    from yamldb.kernel.loader import YamlDatabase

    for field_type in FieldType:
        name = f"as_{field_type.value}"
        assert callable(getattr(fields, name))
        assert callable(getattr(YamlDatabase, name))


def test_import_has_no_layout_side_effect():
    """Importing yamldb must not read the process-wide layout."""
    import yamldb
    from yamldb import layout

    assert layout._layout is None
    assert yamldb.__version__
