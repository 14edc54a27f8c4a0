import asyncio
import logging
import os

from httpx import URL

from sf_tooling import AsyncSalesforceClient, SalesforceToken

LOGGER = logging.getLogger()
logging.basicConfig(level=logging.INFO)

APEX = """
List<Account> accounts = [SELECT Id FROM Account LIMIT 5];
System.debug(accounts.size() + ' accounts');
"""


async def main():
    token = SalesforceToken(URL(os.environ["SF_INSTANCE_URL"]), os.environ["SF_ACCESS_TOKEN"])
    async with AsyncSalesforceClient(token=token) as client:
        execution, apex_classes = await asyncio.gather(
            client.tooling.execute_anonymous(APEX),
            client.tooling.query("SELECT Id, Name FROM ApexClass WHERE NamespacePrefix = null"),
        )
        if not execution.compiled:
            LOGGER.error("Line %d, column %d: %s", execution.line, execution.column, execution.compileProblem)
        elif not execution.success:
            LOGGER.error("%s\n%s", execution.exceptionMessage, execution.exceptionStackTrace)
        else:
            LOGGER.info("Anonymous Apex ran successfully")
        LOGGER.info("%d unmanaged Apex classes", apex_classes["totalSize"])


if __name__ == "__main__":
    asyncio.run(main())
