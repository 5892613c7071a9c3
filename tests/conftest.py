import pytest

from sybase_dialect.query_builder.sybase.builder import SybaseQueryBuilder
from sybase_dialect.settings.generator import GeneratorSettings
from sybase_dialect.types.capabilities import Supports


@pytest.fixture
def generator_settings():
    return GeneratorSettings(
        quote_char='"',
        max_statement_arguments=250,
        default_delete_limit=1,
        strict_features=True,
        timezone="UTC",
        supports=Supports(),
    )


@pytest.fixture
def builder(generator_settings):
    return SybaseQueryBuilder(generator_settings)


@pytest.fixture
def lenient_builder(generator_settings):
    return SybaseQueryBuilder(generator_settings.model_copy(update={"strict_features": False}))


@pytest.fixture
def user_model():
    """Model with an identity primary key, a unique email and a plain name."""
    from sybase_dialect.types.columns import ModelMeta

    return ModelMeta(
        table_name="users",
        attributes={
            "id": {"data_type": "INTEGER", "primary_key": True, "auto_increment": True},
            "email": {"data_type": "STRING", "unique": True},
            "name": {"data_type": "STRING"},
        },
    )
