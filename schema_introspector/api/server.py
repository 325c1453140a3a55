"""
FastAPI application exposing graph schema introspection.
"""

from __future__ import annotations

import logging
from typing import Callable

from fastapi import Depends, FastAPI, HTTPException, Query, Response
from neo4j import GraphDatabase
from neo4j.exceptions import Neo4jError

from schema_introspector.api.models import HealthResponse, IntrospectionRequest
from schema_introspector.config import IntrospectionConfig, Neo4jSettings, load_settings
from schema_introspector.graph import Neo4jSchemaSource, SchemaSource, dumps
from schema_introspector.pipeline import Introspector

logger = logging.getLogger(__name__)


def create_app(
    settings: Neo4jSettings | None = None,
    source_factory: Callable[[], SchemaSource] | None = None,
) -> FastAPI:
    if source_factory is None:
        settings = settings or load_settings()
    app = FastAPI(title="Graph Schema Introspector API", version="0.1.0")

    @app.on_event("startup")
    def startup() -> None:
        if source_factory is not None:
            app.state.schema_source = source_factory()
            return
        driver = GraphDatabase.driver(
            settings.uri,
            auth=(settings.username, settings.password),
        )
        app.state.neo4j_driver = driver
        app.state.schema_source = Neo4jSchemaSource(settings=settings, driver=driver)

    @app.on_event("shutdown")
    def shutdown() -> None:
        driver = getattr(app.state, "neo4j_driver", None)
        if driver:
            driver.close()

    def get_source() -> SchemaSource:
        source = getattr(app.state, "schema_source", None)
        if source is None:
            raise RuntimeError("Schema source not initialized")
        return source

    def render(source: SchemaSource, config: IntrospectionConfig) -> Response:
        try:
            schema = Introspector(source, config).build_schema()
        except Neo4jError as exc:
            logger.error("Introspection failed: %s", exc)
            raise HTTPException(status_code=502, detail=str(exc)) from exc
        except LookupError as exc:
            raise HTTPException(status_code=502, detail=str(exc)) from exc
        return Response(
            content=dumps(schema, pretty_print=config.pretty_print),
            media_type="application/json",
        )

    @app.get("/health", response_model=HealthResponse)
    def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.get("/introspect")
    def introspect_get(
        pretty_print: bool = Query(False, alias="prettyPrint"),
        use_constant_ids: bool = Query(True, alias="useConstantIds"),
        quote_tokens: bool = Query(True, alias="quoteTokens"),
        sample_only: bool = Query(True, alias="sampleOnly"),
        source: SchemaSource = Depends(get_source),
    ) -> Response:
        config = IntrospectionConfig(
            pretty_print=pretty_print,
            use_constant_ids=use_constant_ids,
            quote_tokens=quote_tokens,
            sample_only=sample_only,
        )
        return render(source, config)

    @app.post("/introspect")
    def introspect_post(
        body: IntrospectionRequest,
        source: SchemaSource = Depends(get_source),
    ) -> Response:
        return render(source, body.to_config())

    return app
