from __future__ import annotations
import sys
import asyncio
import argparse
from json import dumps
from typing import Mapping, Sequence
from logging import getLogger
from pydantic import ValidationError
from persist_query.adapters.onegraph import OneGraphAdapter
from persist_query.config.general import general
from persist_query.config.onegraph import OneGraph
from persist_query.exceptions import PersistQueryError
from persist_query.transforms.persisted_query_configuration import transform_query

logger = getLogger(__name__)


async def persist_query(
    query_text: str,
    settings: OneGraph | None = None,
    environ: Mapping[str, str] | None = None,
    **kwargs,
) -> str:
    """Persist `query_text` on OneGraph and return the persisted query id.

    `environ` is where `@persistedQueryConfiguration` environment variables are
    looked up, the process environment when omitted. Extra keyword arguments go
    to `OneGraphAdapter` (a `transport` in tests).
    """
    transformed = transform_query(query_text, environ=environ)
    adapter = OneGraphAdapter(settings or OneGraph(), **kwargs)
    return await adapter.persist(transformed)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="persist-query",
        description="Persist a GraphQL document on OneGraph and print its id.",
    )
    parser.add_argument(
        "file",
        nargs="?",
        help="GraphQL document to persist (default: stdin)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="print the rewritten query and its free variables without submitting",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"{general.PROJECT_NAME} {general.API_VERSION}",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        if args.file is None:
            query_text = sys.stdin.read()
        else:
            with open(args.file, encoding="utf-8") as handle:
                query_text = handle.read()

        if args.dry_run:
            transformed = transform_query(query_text)
            print(
                dumps(
                    {
                        "query": transformed.query,
                        "freeVariables": sorted(transformed.free_variables),
                        "accessTokenConfigured": transformed.access_token is not None,
                    },
                    indent=2,
                )
            )
            return 0
        print(asyncio.run(persist_query(query_text)))
    except PersistQueryError as e:
        logger.error("%s: %s", e.__class__.__name__, e)
        return 1
    except ValidationError as e:
        fields = [".".join(str(p) for p in error["loc"]) for error in e.errors()]
        logger.error("Invalid OneGraph settings: %s", ", ".join(fields))
        return 1
    except OSError as e:
        logger.error("Cannot read query: %s", e)
        return 1
    return 0


def run():
    sys.exit(main())


if __name__ == "__main__":
    run()
