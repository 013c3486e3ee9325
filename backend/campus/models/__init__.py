from campus.models.base import Base
from campus.models.block import Block
from campus.models.reservation import Reservation, ReservationStatus
from campus.models.room import Room
from campus.models.student import Student
from campus.models.timetable_entry import TimetableEntry

__all__ = [
	"Base",
	"Block",
	"Reservation",
	"ReservationStatus",
	"Room",
	"Student",
	"TimetableEntry",
]
