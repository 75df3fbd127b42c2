"""Text codec for persisted rule conditions, durations and schedules."""
from codec.condition import decode_condition, encode_condition
from codec.duration import decode_duration, encode_duration
from codec.schedule import decode_schedule, encode_schedule, is_weekly_schedule
