"""Database service for Cloud Spanner."""

import concurrent.futures
import os
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

from google.api_core import exceptions as api_exceptions
from google.cloud import spanner
from google.cloud.spanner_v1 import ExecuteSqlRequest

from spanner_mcp.lib.prototext import to_pb
from spanner_mcp.models.error_types import (
    MCPError,
    DatabaseConnectionError,
    DatabaseNotFoundError,
    DdlOperationError,
    InvalidQueryError
)
from spanner_mcp.models.tool_requests import DatabaseRef
from spanner_mcp.utils.logger import get_logger, log_statement, log_error_with_context

# Module logger
logger = get_logger(__name__)


class SpannerService:
    """Service wrapping the Spanner data and database admin APIs."""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """Initialize Spanner service.

        Args:
            config: Service configuration dictionary (see ServerConfig.to_dict)
        """
        self.config = config or {}
        self.query_timeout = self.config.get('query_timeout', 60)
        self.ddl_timeout = self.config.get('ddl_timeout', 600)
        self._clients: Dict[str, spanner.Client] = {}

    def get_client(self, project: str) -> spanner.Client:
        """Return the cached client for a project, creating it on first use.

        Raises:
            DatabaseConnectionError: If the client cannot be created, e.g. missing credentials
        """
        client = self._clients.get(project)
        if client is not None:
            return client

        logger.info(f"Creating Spanner client for project: {project}")
        emulator_host = self.config.get('emulator_host')
        if emulator_host:
            # The client library only picks up the emulator from the environment
            os.environ.setdefault('SPANNER_EMULATOR_HOST', emulator_host)
            logger.info(f"Using Spanner emulator at {os.environ['SPANNER_EMULATOR_HOST']}")
        try:
            client = spanner.Client(project=project)
        except Exception as e:
            log_error_with_context(e, {'project': project}, logger)
            raise DatabaseConnectionError(f"Failed to create Spanner client: {e}")

        self._clients[project] = client
        return client

    @contextmanager
    def database(self, ref: DatabaseRef):
        """Get a database handle, translating API errors into MCP errors.

        Yields:
            google.cloud.spanner_v1.database.Database
        """
        client = self.get_client(ref.project)
        try:
            yield client.instance(ref.instance).database(ref.database)
        except api_exceptions.NotFound as e:
            logger.error(f"Database not found: {ref.path}: {e}")
            raise DatabaseNotFoundError(ref.path)
        except api_exceptions.PermissionDenied as e:
            logger.error(f"Permission denied on {ref.path}: {e}")
            raise MCPError(f"Permission denied: {e}", recoverable=False)
        except api_exceptions.Unauthenticated as e:
            raise DatabaseConnectionError(f"Authentication failed: {e}")
        except (api_exceptions.DeadlineExceeded, api_exceptions.ServiceUnavailable) as e:
            logger.warning(f"Spanner unavailable or too slow: {e}")
            raise MCPError(f"Spanner request timed out or is unavailable: {e}", recoverable=True)

    def analyze_query(self, ref: DatabaseRef, query: str):
        """Ask Spanner to plan a query without executing it.

        Args:
            ref: Target database
            query: SQL or GQL text

        Returns:
            google.cloud.spanner_v1.QueryPlan protobuf message

        Raises:
            InvalidQueryError: If Spanner rejects the query
            MCPError: For other API failures
        """
        log_statement(query, ref.path, logger)
        with self.database(ref) as database:
            try:
                with database.snapshot() as snapshot:
                    results = snapshot.execute_sql(
                        query,
                        query_mode=ExecuteSqlRequest.QueryMode.PLAN,
                        timeout=self.query_timeout,
                    )
                    # Stats are only populated once the stream is consumed
                    for _ in results:
                        pass
                    stats = results.stats
            except (api_exceptions.InvalidArgument, api_exceptions.FailedPrecondition) as e:
                logger.error(f"Query rejected: {e}")
                raise InvalidQueryError(query, e.message)

        if stats is None:
            raise MCPError("Spanner returned no query plan", recoverable=True)
        plan = to_pb(stats.query_plan)
        logger.debug(f"Query plan has {len(plan.plan_nodes)} nodes")
        return plan

    def get_database_ddl(self, ref: DatabaseRef):
        """Fetch the DDL statements and proto descriptors of a database.

        Returns:
            google.cloud.spanner_admin_database_v1.GetDatabaseDdlResponse protobuf message
        """
        logger.debug(f"Fetching DDL of {ref.path}")
        with self.database(ref):
            api = self.get_client(ref.project).database_admin_api
            response = api.get_database_ddl(database=ref.path, timeout=self.query_timeout)
        response = to_pb(response)
        logger.debug(f"Fetched {len(response.statements)} DDL statements")
        return response

    def update_database_ddl(self, ref: DatabaseRef, statements: List[str]):
        """Apply DDL statements and wait for the schema change to finish.

        Returns:
            google.cloud.spanner_admin_database_v1.UpdateDatabaseDdlMetadata protobuf message

        Raises:
            DdlOperationError: If the statements are rejected, fail or time out
        """
        for statement in statements:
            log_statement(statement, ref.path, logger)

        with self.database(ref):
            api = self.get_client(ref.project).database_admin_api
            try:
                operation = api.update_database_ddl(database=ref.path, statements=statements)
                logger.info(f"Started DDL operation {operation.operation.name} on {ref.path}")
                operation.result(timeout=self.ddl_timeout)
            except (api_exceptions.InvalidArgument, api_exceptions.FailedPrecondition) as e:
                logger.error(f"DDL rejected: {e}")
                raise DdlOperationError(statements, e.message)
            except concurrent.futures.TimeoutError:
                logger.warning(f"DDL operation still running after {self.ddl_timeout}s")
                raise DdlOperationError(
                    statements,
                    f"operation did not finish within {self.ddl_timeout} seconds",
                    recoverable=True
                )
            except api_exceptions.GoogleAPICallError as e:
                if isinstance(e, (api_exceptions.NotFound, api_exceptions.PermissionDenied,
                                  api_exceptions.Unauthenticated, api_exceptions.DeadlineExceeded,
                                  api_exceptions.ServiceUnavailable)):
                    raise
                logger.error(f"DDL operation failed: {e}")
                raise DdlOperationError(statements, e.message)

        return to_pb(operation.metadata)

    def close(self):
        """Close all cached clients and their gRPC channels."""
        if self._clients:
            logger.info(f"Closing {len(self._clients)} Spanner client(s)")
        for project, client in self._clients.items():
            try:
                client.close()
            except Exception as e:
                log_error_with_context(e, {"project": project}, logger)
        self._clients.clear()
