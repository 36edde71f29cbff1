from .processor import BatchProcessor, BatchProgress

__all__ = ["BatchProcessor", "BatchProgress"]
