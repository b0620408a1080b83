"""
Configuration management using Pydantic.
"""

from pathlib import Path
from typing import List

import pendulum
import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.exceptions import EventTypeNotFound, MalformedTimeOfDay
from .domain.models import (
    DayOfWeek,
    EventType,
    Schedule,
    WeeklyAvailabilityEntry,
    parse_time_of_day,
)


def validate_timezone_name(value: str) -> str:
    """Ensure the value names a timezone in the IANA database."""
    try:
        pendulum.timezone(value)
    except (ValueError, KeyError) as exc:
        raise ValueError(f"Unknown timezone: {value!r}") from exc
    return value


class DefaultsConfig(BaseModel):
    """Default settings for candidate generation."""
    step_minutes: int = 15
    horizon_days: int = 7

    @field_validator("step_minutes", "horizon_days")
    @classmethod
    def validate_positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("value must be greater than zero")
        return value


class GoogleConfig(BaseModel):
    """Google Calendar access settings. Token acquisition happens elsewhere."""
    access_token_env: str = "GOOGLE_ACCESS_TOKEN"
    calendar_id: str = "primary"


class AvailabilityConfig(BaseModel):
    """One weekly availability window as written by the host."""
    day_of_week: DayOfWeek
    start_time: str
    end_time: str

    @field_validator("day_of_week", mode="before")
    @classmethod
    def parse_day(cls, value):
        if isinstance(value, str):
            return DayOfWeek.from_label(value)
        return value

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time_format(cls, value: str) -> str:
        """Normalize to zero-padded ``HH:MM``."""
        try:
            parsed = parse_time_of_day(value)
        except MalformedTimeOfDay as exc:
            raise ValueError(str(exc)) from exc
        return parsed.strftime("%H:%M")

    @model_validator(mode="after")
    def validate_order(self) -> "AvailabilityConfig":
        """Overnight windows are not supported."""
        if self.end_time <= self.start_time:
            raise ValueError(
                f"end_time {self.end_time} must be later than start_time {self.start_time}"
            )
        return self

    def to_entry(self) -> WeeklyAvailabilityEntry:
        return WeeklyAvailabilityEntry(
            day_of_week=self.day_of_week,
            start_time=self.start_time,
            end_time=self.end_time,
        )


class ScheduleConfig(BaseModel):
    """A complete weekly schedule. Saving one replaces the previous schedule wholesale."""
    timezone: str
    availabilities: List[AvailabilityConfig] = Field(default_factory=list)

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        return validate_timezone_name(value)

    def to_schedule(self, host_id: str) -> Schedule:
        return Schedule(
            host_id=host_id,
            timezone=self.timezone,
            availabilities=tuple(a.to_entry() for a in self.availabilities),
        )


class EventTypeConfig(BaseModel):
    """A bookable event type."""
    id: str
    name: str
    duration_minutes: int = 30
    description: str = ""
    is_active: bool = True

    @field_validator("duration_minutes")
    @classmethod
    def validate_duration(cls, value: int) -> int:
        """Ensure meeting duration is positive."""
        if value <= 0:
            raise ValueError("duration_minutes must be greater than zero")
        return value

    def to_event_type(self, host_id: str) -> EventType:
        return EventType(
            id=self.id,
            host_id=host_id,
            name=self.name,
            duration_in_minutes=self.duration_minutes,
            description=self.description,
            is_active=self.is_active,
        )


class HostConfig(BaseModel):
    """A host who publishes availability and accepts bookings."""
    id: str
    name: str = ""
    calendar_id: str = ""  # Falls back to google.calendar_id
    schedule: ScheduleConfig | None = None
    events: List[EventTypeConfig] = Field(default_factory=list)

    @field_validator("events")
    @classmethod
    def validate_unique_events(cls, value: List[EventTypeConfig]) -> List[EventTypeConfig]:
        seen: set[str] = set()
        for event in value:
            if event.id in seen:
                raise ValueError(f"Duplicate event id detected: {event.id}")
            seen.add(event.id)
        return value

    def display_name(self) -> str:
        return self.name or self.id

    def find_event(self, event_id: str) -> EventType:
        """
        Look up one of the host's event types.

        Raises:
            EventTypeNotFound: If the host publishes no such event
        """
        for event in self.events:
            if event.id == event_id:
                return event.to_event_type(self.id)
        raise EventTypeNotFound(f"Host '{self.id}' has no event type '{event_id}'")


class AppConfig(BaseModel):
    """Application configuration."""
    timezone: str = "UTC"  # Viewer timezone for candidates and display
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    google: GoogleConfig = Field(default_factory=GoogleConfig)
    hosts: List[HostConfig] = Field(default_factory=list)

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        return validate_timezone_name(value)

    @field_validator("hosts")
    @classmethod
    def validate_hosts(cls, value: List[HostConfig]) -> List[HostConfig]:
        """Host ids are unique; a host owns at most one schedule."""
        seen: set[str] = set()
        for host in value:
            key = host.id.lower()
            if key in seen:
                raise ValueError(f"Duplicate host id detected: {host.id}")
            seen.add(key)
        return value

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        return cls(**data)

    def find_host(self, host_id: str) -> HostConfig | None:
        """Find a host by id (case-insensitive)."""
        for host in self.hosts:
            if host.id.lower() == host_id.lower():
                return host
        return None

    def calendar_id_for(self, host: HostConfig) -> str:
        return host.calendar_id or self.google.calendar_id


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    config_path = Path.cwd() / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
