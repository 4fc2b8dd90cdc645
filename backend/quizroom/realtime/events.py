"""Socket.IO event names."""

# Inbound
ROOM_CREATE = "room:create"
ROOM_CREATE_AUTO = "room:create_auto"
ROOM_JOIN = "room:join"
ROOM_SET_DURATION = "room:set_duration"
ROOM_SET_QUESTION_COUNT = "room:set_question_count"
GAME_ADVANCE = "game:advance"
GAME_REVEAL_RESULTS = "game:reveal_results"
GAME_FINISH = "game:finish"
GAME_RESET = "game:reset"
ANSWER_SUBMIT = "answer:submit"

# Outbound
ROOM_CREATED = "room:created"
ROOM_STATE = "room:state"
ROOM_MODERATOR_STATE = "room:moderator_state"
ROOM_ERROR = "room:error"
