from pydantic import BaseModel, Field
from pydantic.types import JsonValue


PERSIST_QUERY_MUTATION = """
  mutation PersistQuery(
    $freeVariables: [String!]!
    $appId: String!
    $accessToken: String
    $query: String!
  ) {
    oneGraph {
      createPersistedQuery(
        input: {
          query: $query
          accessToken: $accessToken
          appId: $appId
          cacheStrategy: { timeToLiveSeconds: 300 }
          freeVariables: $freeVariables
        }
      ) {
        persistedQuery {
          id
        }
      }
    }
  }
"""


class TransformedQuery(BaseModel):
    query: str
    free_variables: set[str] = Field(default_factory=set)
    access_token: str | None = Field(default=None, repr=False)


class PersistQueryVariables(BaseModel):
    query: str
    appId: str
    accessToken: str | None = None
    freeVariables: list[str]


class PersistQueryRequest(BaseModel):
    query: str = PERSIST_QUERY_MUTATION
    variables: PersistQueryVariables


class PersistedQuery(BaseModel):
    id: str


class CreatePersistedQuery(BaseModel):
    persistedQuery: PersistedQuery


class OneGraphMutation(BaseModel):
    createPersistedQuery: CreatePersistedQuery


class PersistQueryData(BaseModel):
    oneGraph: OneGraphMutation


class PersistQueryResponse(BaseModel):
    data: PersistQueryData | None = None
    errors: list[JsonValue] | None = None
    extensions: JsonValue | None = None
