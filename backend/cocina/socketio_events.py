from functools import wraps

from flask import current_app, request
from flask_socketio import close_room, emit, join_room, leave_room

from cocina import rooms, socketio
from cocina.errors import KitchenError, MalformedPayload, UnresolvableConnection
from cocina.protocol import parse_event
from cocina.services.kitchen.orders import starting_players
from cocina.services.kitchen.registry import normalize_code


def _get_sid() -> str:
    return request.sid  # type: ignore


def _reply_error(exc: KitchenError) -> None:
    if exc.event is None:
        return
    payload = exc.payload()
    if payload is None:
        emit(exc.event)
    else:
        emit(exc.event, payload)


def _assign_player(room, player) -> None:
    emit('assignPlayer', {
        'playerId': player.slot,
        'players': starting_players(),
        'gameState': room.game_state.to_dict(),
    })


def _leave_current_room(sid: str) -> None:
    """Drop ``sid`` from whatever room it is in, telling the rest of that room."""
    room, deleted = rooms.remove_player(sid)
    if room is None:
        return
    leave_room(room.code, sid=sid)
    if deleted:
        current_app.logger.info(f"[room-delete] code={room.code} reason=empty")
        return
    emit('updatePlayers', room.players_to_list(), to=room.code)
    emit('playerLeft', to=room.code)


def room_event(name, reads_payload=True):
    """Run the handler with the sender's room and the parsed payload.

    Events from connections outside any room, or with a payload of the
    wrong shape, are dropped without reply. With ``reads_payload`` off
    the payload is not looked at and the handler gets None.
    """
    def decorator(fn):
        @wraps(fn)
        def handler(data=None):
            sid = _get_sid()
            with rooms.lock:
                try:
                    room = rooms.require_room(sid)
                    message = parse_event(name, data) if reads_payload else None
                except UnresolvableConnection:
                    current_app.logger.debug(f"[ignored] event={name} sid={sid} not in a room")
                    return
                except MalformedPayload as exc:
                    current_app.logger.warning(f"[malformed] sid={sid} {exc}")
                    return
                fn(room, message, data)
        handler.event_name = name
        return handler
    return decorator


def handle_connect(auth=None):
    current_app.logger.info(f"[connect] sid={_get_sid()}")


def handle_disconnect(reason=None):
    sid = _get_sid()
    current_app.logger.info(f"[disconnect] sid={sid}")
    with rooms.lock:
        _leave_current_room(sid)


def handle_create_room(data=None):
    sid = _get_sid()
    with rooms.lock:
        _leave_current_room(sid)
        try:
            room = rooms.create_room(sid)
        except KitchenError as exc:
            current_app.logger.error(f"[room-create-failed] sid={sid} {exc}")
            _reply_error(exc)
            return
        join_room(room.code)
        current_app.logger.info(f"[room-create] code={room.code} sid={sid}")
        emit('roomCreated', {'roomCode': room.code})
        _assign_player(room, room.players[0])


def handle_join_room(data=None):
    sid = _get_sid()
    with rooms.lock:
        try:
            message = parse_event('joinRoom', data)
        except MalformedPayload as exc:
            current_app.logger.warning(f"[malformed] sid={sid} {exc}")
            emit('invalidCode')
            return
        current = rooms.room_for(sid)
        if current is not None and current.code == normalize_code(message.room_code):
            player = next(p for p in current.players if p.sid == sid)
            _assign_player(current, player)
            return
        try:
            rooms.joinable(message.room_code)
            _leave_current_room(sid)
            room, player = rooms.join_room(message.room_code, sid)
        except KitchenError as exc:
            current_app.logger.info(f"[room-join-rejected] code={message.room_code!r} sid={sid} event={exc.event}")
            _reply_error(exc)
            return
        join_room(room.code)
        current_app.logger.info(f"[room-join] code={room.code} sid={sid} slot={player.slot}")
        _assign_player(room, player)
        emit('updatePlayers', room.players_to_list(), to=room.code)
        emit('startGame', to=room.code)


@room_event('cancelRoom', reads_payload=False)
def handle_cancel_room(room, message, data):
    current_app.logger.info(f"[room-cancel] code={room.code} sid={_get_sid()}")
    emit('roomClosed', to=room.code)
    rooms.delete_room(room.code)
    close_room(room.code)


@room_event('keyPress')
def handle_key_press(room, message, data):
    emit('keyPress', data, to=room.code)


@room_event('updatePosition')
def handle_update_position(room, message, data):
    emit('updatePosition', data, to=room.code)


@room_event('ingredientPicked')
def handle_ingredient_picked(room, message, data):
    state = room.game_state
    state.team_ingredients.append(message.ingredient)
    state.ingredient_order = list(message.order)
    emit('ingredientPicked', {
        'ingredient': message.ingredient,
        'teamIngredients': list(state.team_ingredients),
        'ingredientOrder': list(state.ingredient_order),
    }, to=room.code)


@room_event('startCooking')
def handle_start_cooking(room, message, data):
    state = room.game_state
    state.is_cooking = True
    state.cooking_start_time = message.start_time
    emit('startCooking', {'startTime': message.start_time}, to=room.code)


@room_event('pizzaCompleted')
def handle_pizza_completed(room, message, data):
    room.game_state.clear_pizza()
    emit('pizzaCompleted', data, to=room.code)


@room_event('pizzaDiscarded')
def handle_pizza_discarded(room, message, data):
    emit('pizzaDiscarded', data, to=room.code)


@room_event('pizzaDelivered')
def handle_pizza_delivered(room, message, data):
    state = room.game_state
    table = state.table(message.table_index)
    if table is None:
        current_app.logger.warning(f"[malformed] pizzaDelivered: no table {message.table_index} in room {room.code}")
        return
    state.team_score = message.score
    table.has_customer = False
    emit('pizzaDelivered', data, to=room.code)


@room_event('newCustomer')
def handle_new_customer(room, message, data):
    table = room.game_state.table(message.table_index)
    if table is None:
        current_app.logger.warning(f"[malformed] newCustomer: no table {message.table_index} in room {room.code}")
        return
    table.seat_customer(message.customer_timer, message.order)
    emit('newCustomer', data, to=room.code)


@room_event('levelUp')
def handle_level_up(room, message, data):
    state = room.game_state
    state.level = message.level
    if message.new_table is not None:
        state.tables.append(message.new_table)
    current_app.logger.info(f"[level-up] code={room.code} level={state.level} tables={len(state.tables)}")
    emit('levelUp', data, to=room.code)


@room_event('gameWon')
def handle_game_won(room, message, data):
    current_app.logger.info(f"[game-won] code={room.code}")
    emit('gameWon', data, to=room.code)


@room_event('resetGame', reads_payload=False)
def handle_reset_game(room, message, data):
    rooms.reset_game(room)
    current_app.logger.info(f"[game-reset] code={room.code}")
    emit('resetGame', to=room.code)


def register_socketio_handlers() -> None:
    """Register Socket.IO event handlers on the default namespace."""
    socketio.on_event('connect', handle_connect)
    socketio.on_event('disconnect', handle_disconnect)
    socketio.on_event('createRoom', handle_create_room)
    socketio.on_event('joinRoom', handle_join_room)
    for handler in (
        handle_cancel_room,
        handle_key_press,
        handle_update_position,
        handle_ingredient_picked,
        handle_start_cooking,
        handle_pizza_completed,
        handle_pizza_discarded,
        handle_pizza_delivered,
        handle_new_customer,
        handle_level_up,
        handle_game_won,
        handle_reset_game,
    ):
        socketio.on_event(handler.event_name, handler)
