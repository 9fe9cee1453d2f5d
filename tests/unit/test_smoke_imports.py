"""Smoke tests for basic package imports."""


def test_imports_smoke() -> None:
    import embedvec.core  # noqa: F401
    import embedvec.docs_check  # noqa: F401
    import embedvec.ingestion  # noqa: F401
    import embedvec.libs.embedding  # noqa: F401
    import embedvec.libs.vector_store  # noqa: F401
    import embedvec.observability  # noqa: F401
