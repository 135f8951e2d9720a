"""
Discovery service contract.

A discovery run wraps one fetch from a client and reports it as an
envelope instead of raising:

    {'type', 'status': 'success' | 'failed', 'data', 'error', 'metadata'}

The orchestrator decides what a failed run means for the current inventory.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, List
import structlog

from cloudinventory.core.models import CloudResource

logger = structlog.get_logger(__name__)

SUCCESS = 'success'
FAILED = 'failed'


class BaseDiscoveryService(ABC):

    def __init__(self, client, config: Dict[str, Any]):
        self.client = client
        self.config = config
        self.logger = logger.bind(service=self.__class__.__name__)
        self._run_metadata = self._new_run()

    @staticmethod
    def _new_run() -> Dict[str, Any]:
        return {
            'start_time': None,
            'end_time': None,
            'duration_seconds': None,
            'resources_discovered': 0,
            'errors': []
        }

    @abstractmethod
    async def discover(self) -> List[CloudResource]:
        ...

    @abstractmethod
    def get_discovery_type(self) -> str:
        ...

    async def discover_with_metadata(self) -> Dict[str, Any]:
        """Run ``discover`` once and report the outcome with timings."""
        run = self._new_run()
        run['start_time'] = datetime.now(timezone.utc)
        self._run_metadata = run

        results: List[CloudResource] = []
        error = None
        try:
            results = await self.discover() or []
            run['resources_discovered'] = len(results)
        except Exception as e:
            error = str(e)
            run['errors'].append(error)
            self.logger.error("Discovery run failed", discovery_type=self.get_discovery_type(), error=error)
        finally:
            run['end_time'] = datetime.now(timezone.utc)
            run['duration_seconds'] = (run['end_time'] - run['start_time']).total_seconds()

        return {
            'type': self.get_discovery_type(),
            'status': FAILED if error is not None else SUCCESS,
            'data': results,
            'error': error,
            'metadata': dict(run)
        }

    def get_metadata(self) -> Dict[str, Any]:
        """Metadata of the most recent run."""
        return dict(self._run_metadata)
