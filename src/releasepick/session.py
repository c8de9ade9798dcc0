"""
Interactive session control loop.

The loop alternates between reading one input action from the view, dispatching
it to the list model, collecting a finished pipeline run and redrawing. Pipeline
runs execute on a single background worker so navigation and repaint keep
working while a deployment is in flight. Only the loop thread touches the model.
"""

from abc import ABC, abstractmethod
from concurrent.futures import Future, ThreadPoolExecutor
from enum import Enum
from typing import Optional, Tuple

from releasepick.constants import (
    MSG_ACTIVATION_REJECTED,
    MSG_INSTALL_STARTED,
    MSG_QUIT_REJECTED,
    MSG_READY,
)
from releasepick.list_model import ReleaseListModel
from releasepick.log_utils import logger
from releasepick.pipeline import DeploymentPipeline, PipelineResult


class Action(Enum):
    MOVE_DOWN = "move_down"
    MOVE_UP = "move_up"
    DESELECT = "deselect"
    ACTIVATE = "activate"
    FIRST = "first"
    LAST = "last"
    QUIT = "quit"


class SessionView(ABC):
    """
    Rendering backend used by the session.

    The session only needs to paint its current state and to read the next
    input action; layout and key decoding belong to the implementation.
    """

    @abstractmethod
    def draw(self, model: ReleaseListModel, status_message: str) -> None:
        """Paint the list, the detail pane, the status line and, while a deployment is pending, the progress overlay."""

    @abstractmethod
    def read_action(self) -> Optional[Action]:
        """
        Wait briefly for input and return the decoded action.

        Returns:
            Optional[Action]: None when no input arrived or the key is unbound.
        """


class InstallerSession:
    """Wires the list model, the deployment pipeline and a view together."""

    def __init__(
        self,
        model: ReleaseListModel,
        pipeline: DeploymentPipeline,
        view: SessionView,
        executor: Optional[ThreadPoolExecutor] = None,
    ) -> None:
        self.model = model
        self.pipeline = pipeline
        self.view = view
        self.status_message = MSG_READY
        self.last_result: Optional[PipelineResult] = None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="releasepick-pipeline"
        )
        self._running: Optional[Tuple[int, Future]] = None

    def run(self) -> int:
        """
        Drive the loop until the operator quits.

        Returns:
            int: Process exit code, 0 on a clean quit.
        """
        try:
            while True:
                self.poll()
                self.view.draw(self.model, self.status_message)
                action = self.view.read_action()
                if action is not None and not self.handle(action):
                    return 0
        finally:
            self._executor.shutdown(wait=True)

    def handle(self, action: Action) -> bool:
        """
        Apply one input action.

        Returns:
            bool: False when the session should end.
        """
        if action is Action.QUIT:
            pending = self.model.pending_item
            if pending is not None:
                self.status_message = MSG_QUIT_REJECTED.format(tag=pending.tag)
                return True
            return False

        if action is Action.MOVE_DOWN:
            self.model.select_next()
        elif action is Action.MOVE_UP:
            self.model.select_previous()
        elif action is Action.DESELECT:
            self.model.deselect()
        elif action is Action.FIRST:
            self.model.select_first()
        elif action is Action.LAST:
            self.model.select_last()
        elif action is Action.ACTIVATE:
            self._activate()
        return True

    def _activate(self) -> None:
        if self.model.current_item() is None:
            return
        pending = self.model.pending_item
        if pending is not None:
            self.status_message = MSG_ACTIVATION_REJECTED.format(tag=pending.tag)
            return

        index = self.model.activate()
        if index is None:
            return
        item = self.model.items[index]
        self.status_message = MSG_INSTALL_STARTED.format(tag=item.tag)
        logger.debug(f"Scheduling deployment of {item.tag} (item {index})")
        self._running = (index, self._executor.submit(self.pipeline.run, item))

    def poll(self, block: bool = False) -> Optional[PipelineResult]:
        """
        Collect a finished pipeline run and release the pending slot.

        Parameters:
            block: Wait for the running deployment instead of returning early.

        Returns:
            Optional[PipelineResult]: The collected result, or None when nothing
            finished.
        """
        if self._running is None:
            return None
        index, future = self._running
        if not block and not future.done():
            return None

        self._running = None
        item = self.model.items[index]
        try:
            result = future.result()
        except Exception as exc:
            logger.exception(f"Deployment of {item.tag} crashed")
            result = PipelineResult(
                success=False,
                release_tag=item.tag,
                stage="pipeline",
                message=f"Deployment of {item.tag} failed unexpectedly: {exc}",
            )
        finally:
            self.model.finish(index)
        self.last_result = result
        self.status_message = result.message
        return result
