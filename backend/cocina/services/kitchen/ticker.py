import threading

from cocina import socketio
from .orders import random_order


class KitchenTicker:
    """Once per tick, burn overdue pizzas and send impatient customers home.

    ``emit`` and ``defer`` default to the Socket.IO server; tests swap
    them (and the registry clock) out to drive a simulated clock.
    """

    def __init__(self, app, registry, emit=None, defer=None):
        self.app = app
        self.registry = registry
        self.emit = emit or socketio.emit
        self.defer = defer or _defer_background
        self.interval = float(app.config.get('TICK_INTERVAL_SEC', 1))
        self.cooking_timeout = int(app.config.get('COOKING_TIMEOUT_MS', 10000))
        self.customer_patience = int(app.config.get('CUSTOMER_PATIENCE_MS', 60000))
        self.return_delay = float(app.config.get('CUSTOMER_RETURN_DELAY_SEC', 2))
        self.penalty = int(app.config.get('PENALTY_POINTS', 5))
        self._started = False
        self._start_lock = threading.Lock()

    def start(self):
        if self._started:
            return
        with self._start_lock:
            if self._started:
                return
            self._started = True
            socketio.start_background_task(self._run)
        self.app.logger.info(f"[ticker-start] interval={self.interval}s")

    def _run(self):
        while True:
            socketio.sleep(self.interval)
            self.run_once()

    def run_once(self):
        try:
            self.tick()
        except Exception:
            self.app.logger.exception("[tick-error] tick failed, retrying next interval")

    def tick(self, now=None):
        with self.registry.lock:
            now = self.registry.clock() if now is None else now
            for room in self.registry.all():
                try:
                    self._check_oven(room, now)
                    self._check_tables(room, now)
                except Exception:
                    self.app.logger.exception(f"[tick-error] room={room.code}")

    def _check_oven(self, room, now):
        state = room.game_state
        if not state.is_cooking or state.cooking_start_time is None:
            return
        if now - state.cooking_start_time < self.cooking_timeout:
            return
        state.clear_pizza()
        state.team_score -= self.penalty
        self.app.logger.info(f"[pizza-burned] room={room.code} score={state.team_score}")
        self.emit('pizzaBurned', {'score': state.team_score}, to=room.code)

    def _check_tables(self, room, now):
        state = room.game_state
        for index, table in enumerate(state.tables):
            if not table.has_customer or table.customer_timer is None:
                continue
            if now - table.customer_timer <= self.customer_patience:
                continue
            table.has_customer = False
            state.team_score -= self.penalty
            self.app.logger.info(f"[customer-left] room={room.code} table={index} score={state.team_score}")
            self.emit('customerLeft', {'tableIndex': index, 'score': state.team_score}, to=room.code)
            self.defer(self.return_delay, self.seat_new_customer, room.code, state, index)

    def seat_new_customer(self, code, state, index):
        """Bring a customer back to a table after the return delay.

        No-op when the room was torn down or its game reset meanwhile.
        """
        with self.registry.lock:
            room = self.registry.get(code)
            if room is None or room.game_state is not state:
                self.app.logger.info(f"[customer-return-skip] room={code} table={index}")
                return
            table = state.table(index)
            if table is None:
                return
            table.seat_customer(self.registry.clock(), random_order())
            self.emit('newCustomer', {
                'tableIndex': index,
                'customerTimer': table.customer_timer,
                'order': list(table.order),
            }, to=code)


def _defer_background(delay, fn, *args):
    def _runner():
        socketio.sleep(delay)
        fn(*args)

    socketio.start_background_task(_runner)
