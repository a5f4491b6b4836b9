"""arq worker settings module.

Import path for arq CLI: arq loro.workers.settings.WorkerSettings
"""

from __future__ import annotations

from loro.sales_tips.worker import SalesTipWorkerSettings as WorkerSettings

__all__ = ["WorkerSettings"]
