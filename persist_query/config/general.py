# This software is provided to the United States Government (USG) with SBIR Data Rights as defined at Federal Acquisition Regulation 52.227-14, "Rights in Data-SBIR Program" (May 2014) SBIR Rights Notice (Dec 2023-2024) These SBIR data are furnished with SBIR rights under Contract No. H9241522D0001. For a period of 19 years, unless extended in accordance with FAR 27.409(h), after acceptance of all items to be delivered under this contract, the Government will use these data for Government purposes only, and they shall not be disclosed outside the Government (including disclosure for procurement purposes) during such period without permission of the Contractor, except that, subject to the foregoing use and disclosure prohibitions, these data may be disclosed for use by support Contractors. After the protection period, the Government has a paid-up license to use, and to authorize others to use on its behalf, these data for Government purposes, but is relieved of all disclosure prohibitions and assumes no liability for unauthorized use of these data by third parties. This notice shall be affixed to any reproductions of these data, in whole or in part.
from __future__ import annotations
from typing import Any
from logging import getLevelName
from pydantic import ConfigDict, model_validator
from persist_query.config._base import Base


class General(Base):
    model_config = ConfigDict(env_prefix="PERSIST_QUERY_")  # type: ignore

    PROJECT_NAME: str = "persist_query"
    API_VERSION: str = "0.1.0"
    LOG_LEVEL: str = "INFO"

    @model_validator(mode="after")
    def valid_log_level(self) -> Any:
        level = self.LOG_LEVEL.upper()
        if not isinstance(getLevelName(level), int):
            raise ValueError(f"Unknown log level {self.LOG_LEVEL}")
        self.LOG_LEVEL = level
        return self


general = General()
