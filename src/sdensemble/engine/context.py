"""Processing context with logging and stage timing."""

from __future__ import annotations
import logging
import time
import uuid
from typing import Dict, Any, Optional
import structlog


def configure_logging(level: str = "INFO", json: bool = False) -> None:
    """Configure structlog processors for batch or interactive use.
    
    Args:
        level: Minimum log level name
        json: Render JSON lines instead of the console renderer
    """
    renderer = structlog.processors.JSONRenderer() if json else structlog.dev.ConsoleRenderer()
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="ISO"),
            structlog.processors.add_log_level,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level.upper())
        ),
        logger_factory=structlog.PrintLoggerFactory(),
    )


class EnsembleContext:
    """Context for one ensemble-processing call: bound logger and stage timings."""
    
    def __init__(
        self,
        run_id: Optional[str] = None,
        threads: int = 1,
        parallel: bool = False,
        logger: Optional[structlog.BoundLogger] = None
    ):
        self.run_id = run_id or f"ensemble_{uuid.uuid4().hex[:8]}"
        self.threads = threads
        self.parallel = parallel
        
        if logger is None:
            self.logger = structlog.get_logger().bind(run_id=self.run_id)
        else:
            self.logger = logger.bind(run_id=self.run_id)
        
        self._start_time: Optional[float] = None
        self._stage_times: Dict[str, float] = {}
        
        self.metadata: Dict[str, Any] = {
            "run_id": self.run_id,
            "threads": threads,
            "parallel": parallel,
        }
    
    def start_run(self) -> None:
        """Mark start of processing."""
        self._start_time = time.perf_counter()
        self.logger.info("Ensemble processing started")
    
    def end_run(self) -> float:
        """Mark end of processing and return total runtime in seconds."""
        if self._start_time is None:
            return 0.0
        
        runtime = time.perf_counter() - self._start_time
        self.logger.info("Ensemble processing completed", runtime_s=runtime)
        return runtime
    
    def time_stage(self, stage_name: str):
        """Context manager for timing a stage."""
        return _StageTimer(self, stage_name)
    
    def get_runtime_metadata(self) -> Dict[str, Any]:
        """Get runtime metadata for this call."""
        metadata = self.metadata.copy()
        metadata.update({
            "stage_times": self._stage_times.copy(),
            "total_runtime_s": sum(self._stage_times.values())
        })
        return metadata


class _StageTimer:
    """Context manager for timing stage execution."""
    
    def __init__(self, context: EnsembleContext, stage_name: str):
        self.context = context
        self.stage_name = stage_name
        self.start_time: Optional[float] = None
    
    def __enter__(self):
        self.start_time = time.perf_counter()
        self.context.logger.debug("Stage started", stage=self.stage_name)
        return self
    
    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.start_time is not None:
            runtime = time.perf_counter() - self.start_time
            self.context._stage_times[self.stage_name] = runtime
            
            if exc_type is None:
                self.context.logger.info(
                    "Stage completed", 
                    stage=self.stage_name,
                    runtime_s=runtime
                )
            else:
                self.context.logger.error(
                    "Stage failed", 
                    stage=self.stage_name,
                    runtime_s=runtime,
                    error=str(exc_val)
                )
        return False
