# This software is provided to the United States Government (USG) with SBIR Data Rights as defined at Federal Acquisition Regulation 52.227-14, "Rights in Data-SBIR Program" (May 2014) SBIR Rights Notice (Dec 2023-2024) These SBIR data are furnished with SBIR rights under Contract No. H9241522D0001. For a period of 19 years, unless extended in accordance with FAR 27.409(h), after acceptance of all items to be delivered under this contract, the Government will use these data for Government purposes only, and they shall not be disclosed outside the Government (including disclosure for procurement purposes) during such period without permission of the Contractor, except that, subject to the foregoing use and disclosure prohibitions, these data may be disclosed for use by support Contractors. After the protection period, the Government has a paid-up license to use, and to authorize others to use on its behalf, these data for Government purposes, but is relieved of all disclosure prohibitions and assumes no liability for unauthorized use of these data by third parties. This notice shall be affixed to any reproductions of these data, in whole or in part.
# pylint: disable=consider-using-f-string
from random import choices
from time import time
from string import ascii_uppercase, digits
from datetime import datetime
from logging import getLogger, config
from os.path import join, dirname, abspath
from httpx import Request, Response
from persist_query.config.general import general


LOGGING_CONF = join(dirname(abspath(__file__)), "../config/logging.conf")

config.fileConfig(
    LOGGING_CONF,
    defaults={"log_level": general.LOG_LEVEL},
    disable_existing_loggers=False,
)

logger = getLogger(__name__)


class RequestLogger:
    """httpx event hooks logging each outbound request and its outcome."""

    async def on_request(self, request: Request):
        idem = "".join(choices(ascii_uppercase + digits, k=6))
        request.extensions["rid"] = idem
        request.extensions["start_time"] = time()
        logger.info("rid=%s start request path=%s", idem, request.url.path)

    async def on_response(self, response: Response):
        request = response.request
        idem = request.extensions.get("rid", "------")
        process_time = (time() - request.extensions.get("start_time", time())) * 1000
        formatted_process_time = "{0:.2f}".format(process_time)
        logger.info(
            "rid=%s time=%s host=%s method=%s path=%s status_code=%s query=%s completed_in=%sms",
            idem,
            datetime.now().isoformat(),
            request.url.host,
            request.method,
            request.url.path,
            response.status_code,
            request.url.query.decode(),
            formatted_process_time,
        )

    @property
    def event_hooks(self):
        return {"request": [self.on_request], "response": [self.on_response]}


request_logger = RequestLogger()
