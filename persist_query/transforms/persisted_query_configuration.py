"""Strip `@persistedQueryConfiguration` from a GraphQL document.

The directive only configures how OneGraph stores the query, the service
itself never sees it:

    query Viewer @persistedQueryConfiguration(
        accessToken: { environmentVariable: "GITHUB_TOKEN" }
    ) { ... }

While rewriting we also collect every variable referenced in the document,
those become the free variables of the persisted query.
"""
from __future__ import annotations
import os
from copy import copy
from typing import Any, Mapping
from logging import getLogger
from graphql import GraphQLSyntaxError, parse, print_ast
from graphql.language import (
    DirectiveNode,
    ObjectValueNode,
    OperationDefinitionNode,
    VariableNode,
    Visitor,
    visit,
)
from persist_query.exceptions import (
    DuplicateTokenConfigError,
    MissingEnvironmentVariableError,
    ParseError,
)
from persist_query.interfaces.schemas import TransformedQuery

logger = getLogger(__name__)

CONFIGURATION_DIRECTIVE = "persistedQueryConfiguration"
ACCESS_TOKEN_ARGUMENT = "accessToken"
ENVIRONMENT_VARIABLE_FIELD = "environmentVariable"


def _environment_variable_name(directive: DirectiveNode) -> str | None:
    argument = next(
        (
            a
            for a in directive.arguments or ()
            if a.name.value == ACCESS_TOKEN_ARGUMENT
        ),
        None,
    )
    if argument is None or not isinstance(argument.value, ObjectValueNode):
        return None
    field = next(
        (
            f
            for f in argument.value.fields
            if f.name.value == ENVIRONMENT_VARIABLE_FIELD
        ),
        None,
    )
    if field is None:
        return None
    name = getattr(field.value, "value", None)
    return name if isinstance(name, str) else None


class PersistedQueryConfigurationVisitor(Visitor):
    free_variables: set[str]
    access_token: str | None

    def __init__(self, environ: Mapping[str, str]):
        super().__init__()
        self.environ = environ
        self.free_variables = set()
        self.access_token = None

    def enter_variable(self, node: VariableNode, *_args: Any) -> None:
        self.free_variables.add(node.name.value)

    def enter_operation_definition(
        self, node: OperationDefinitionNode, *_args: Any
    ) -> OperationDefinitionNode:
        operation_name = node.name.value if node.name else "<anonymous>"
        directives = node.directives or ()
        for directive in directives:
            if directive.name.value != CONFIGURATION_DIRECTIVE:
                continue
            variable = _environment_variable_name(directive)
            if variable is None:
                continue
            if self.access_token is not None:
                raise DuplicateTokenConfigError(operation_name)
            token = self.environ.get(variable)
            if not token:
                raise MissingEnvironmentVariableError(variable)
            logger.debug(
                "operation=%s access token read from %s", operation_name, variable
            )
            self.access_token = token

        rewritten = copy(node)
        rewritten.directives = tuple(
            d for d in directives if d.name.value != CONFIGURATION_DIRECTIVE
        )
        return rewritten


def transform_query(
    query_text: str, environ: Mapping[str, str] | None = None
) -> TransformedQuery:
    try:
        document = parse(query_text, no_location=True)
    except GraphQLSyntaxError as e:
        raise ParseError(e.message) from e

    visitor = PersistedQueryConfigurationVisitor(
        os.environ if environ is None else environ
    )
    rewritten = visit(document, visitor)
    logger.debug(
        "collected free variables=%s token_configured=%s",
        sorted(visitor.free_variables),
        visitor.access_token is not None,
    )
    return TransformedQuery(
        query=print_ast(rewritten),
        free_variables=visitor.free_variables,
        access_token=visitor.access_token,
    )
