"""CancellationToken — one cancellation handle shared by every layer of an invocation."""

from collections.abc import Callable

type CancelCallback = Callable[[], None]


class CallbackRegistration:
    """Handle returned by CancellationToken.register(); dispose() detaches the callback."""

    def __init__(self, token: "CancellationToken", callback: CancelCallback) -> None:
        self._token = token
        self._callback = callback

    def dispose(self) -> None:
        self._token._discard(self._callback)


class CancellationToken:
    """Cooperative cancellation signal passed explicitly through runner layers.

    Each layer registers its own cleanup callback and disposes the registration
    once its work has finished. Callbacks run synchronously inside cancel(), in
    registration order, on the event loop thread.
    """

    def __init__(self) -> None:
        self._cancelled = False
        self._callbacks: list[CancelCallback] = []

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        """Signal cancellation. Idempotent: callbacks fire only on the first call."""
        if self._cancelled:
            return
        self._cancelled = True
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback()

    def register(self, callback: CancelCallback) -> CallbackRegistration:
        """Attach *callback*; it runs immediately when the token is already cancelled."""
        if self._cancelled:
            callback()
        else:
            self._callbacks.append(callback)
        return CallbackRegistration(token=self, callback=callback)

    def _discard(self, callback: CancelCallback) -> None:
        if callback in self._callbacks:
            self._callbacks.remove(callback)
