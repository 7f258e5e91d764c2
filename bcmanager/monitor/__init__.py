"""
Implementation of the Monitor to be extended by every periodic collector
"""

import time
import logging
from queue import Queue, Empty
from threading import Thread, Event
from abc import ABC, abstractmethod
from typing import Any

from bcmanager.common.bcmanager_logging import get_bcmanager_logger


logger: logging.Logger = get_bcmanager_logger(__name__)


class Monitor(ABC, Thread):
    """
    Serves as a base class to facilitate and structure the periodic gathering of data.
    """

    def __init__(self,
                 name: str,
                 thread_period: float = 60):
        super().__init__()
        # Define default thread attributes
        self.daemon = True
        self._period: float = thread_period

        self.report_channel: Queue = Queue(maxsize=1)

        self.name: str = name or self.__class__.__name__

        # Logging system
        self.logger: logging.Logger = get_bcmanager_logger(self.__class__.__module__)

        self.last_process_duration = None
        self._last_update: float = time.time()
        self._exit_event: Event = Event()

    def set_period(self, period: float):
        logger.debug(f"Setting period for monitor {self.name} to {period}")
        self._period = period

    @abstractmethod
    def update_data(self):
        """
        General updater of the data attribute. To be implemented by class
        extension.
        """
        ...

    @abstractmethod
    def report_data(self) -> Any:
        """
        Returns the data to publish on the report channel
        """

    def send_report(self):
        """
        Sends the latest data to the report channel, discarding the previous report if nobody consumed it
        """
        if self.report_channel.full():
            self.logger.warning(f"Monitor {self.name} report channel not being consumed on time. "
                                f"Discarding old data.")
            try:
                _ = self.report_channel.get_nowait()
            except Empty:
                self.logger.debug("Channel was empty, no need to discard data")

        self.report_channel.put(self.report_data(), block=False)

    def run_update_data(self, monitor_name=None):
        if not monitor_name:
            monitor_name = self.name

        init_time: float = time.time_ns()
        self._last_update = time.time()
        try:
            self.update_data()
            self.send_report()
        except Exception as e:
            self.logger.exception(f'Something went wrong updating monitor {monitor_name}: {e}')
        finally:
            self.last_process_duration = round((time.time_ns() - init_time)/1e9, 4)

    def _compute_wait_time(self, period: float) -> float:
        return period - (time.time() - self._last_update)

    def stop(self):
        self._exit_event.set()

    def run(self) -> None:
        _wait_time: float = 0.0

        while not self._exit_event.wait(timeout=_wait_time):
            self.run_update_data()

            _wait_time = self._compute_wait_time(self._period)
            self.logger.debug(f"Monitor {self.name} waiting for {format(_wait_time, '.2f')} seconds")
            if _wait_time < 0:
                _wait_time = 0.0
                self.logger.warning(f'Monitor {self.name} took too long to complete '
                                    f'({self.last_process_duration} > {self._period})')
