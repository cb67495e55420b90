# This software is provided to the United States Government (USG) with SBIR Data Rights as defined at Federal Acquisition Regulation 52.227-14, "Rights in Data-SBIR Program" (May 2014) SBIR Rights Notice (Dec 2023-2024) These SBIR data are furnished with SBIR rights under Contract No. H9241522D0001. For a period of 19 years, unless extended in accordance with FAR 27.409(h), after acceptance of all items to be delivered under this contract, the Government will use these data for Government purposes only, and they shall not be disclosed outside the Government (including disclosure for procurement purposes) during such period without permission of the Contractor, except that, subject to the foregoing use and disclosure prohibitions, these data may be disclosed for use by support Contractors. After the protection period, the Government has a paid-up license to use, and to authorize others to use on its behalf, these data for Government purposes, but is relieved of all disclosure prohibitions and assumes no liability for unauthorized use of these data by third parties. This notice shall be affixed to any reproductions of these data, in whole or in part.
from __future__ import annotations
from pydantic import model_validator
from persist_query.config._base import Base


class OneGraph(Base):
    # Dashboard credentials, same variable names the frontend build uses
    RAZZLE_ONEGRAPH_APP_ID: str
    OG_DASHBOARD_ACCESS_TOKEN: str
    ONEGRAPH_HOST: str = "serve.onegraph.com"
    ONEGRAPH_PATH: str = "/graphql"
    ONEGRAPH_TIMEOUT: float | None = None
    ONEGRAPH_URI: str | None = None

    @model_validator(mode="after")
    def assemble_endpoint(self):
        if self.ONEGRAPH_URI is not None:
            return self
        path = self.ONEGRAPH_PATH if self.ONEGRAPH_PATH.startswith("/") else f"/{self.ONEGRAPH_PATH}"
        self.ONEGRAPH_URI = f"https://{self.ONEGRAPH_HOST}{path}"
        return self
