from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

RecordingStatus = Literal["idle", "recording", "error"]

PlaybackStatus = Literal["idle", "speaking"]

HealthStatus = Literal["unknown", "connected", "disconnected"]

NoticeLevel = Literal["info", "success", "error"]


class TranslateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    text: str = ""
    inputLanguage: str = Field(default="en-US", min_length=1, max_length=32)
    outputLanguage: str = Field(default="es-ES", min_length=1, max_length=32)
    isMedical: bool = True


class TranslationResult(BaseModel):
    model_config = ConfigDict(extra="forbid")

    translatedText: str
    confidence: float = Field(ge=0.0, le=1.0)
    processingTime: int = Field(default=0, ge=0)


class SessionMetadata(BaseModel):
    model_config = ConfigDict(extra="forbid")

    sessionDuration: int = Field(default=0, ge=0)
    wordsTranslated: int = Field(default=0, ge=0)
    timestamp: Optional[str] = None


class SessionSaveRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    originalText: str = ""
    translatedText: str = ""
    inputLanguage: str = Field(min_length=1, max_length=32)
    outputLanguage: str = Field(min_length=1, max_length=32)
    metadata: SessionMetadata = Field(default_factory=SessionMetadata)


class SessionRecord(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str
    timestamp: str
    originalText: str
    translatedText: str
    inputLanguage: str
    outputLanguage: str
    metadata: SessionMetadata


class HealthReport(BaseModel):
    model_config = ConfigDict(extra="forbid")

    status: Literal["healthy", "degraded"]
    speechApi: str = "available"
    translationApi: Literal["connected", "disconnected"]
    error: Optional[str] = None
    timestamp: str


class ErrorBody(BaseModel):
    model_config = ConfigDict(extra="forbid")

    message: str


class Notice(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    ts_iso: str
    level: NoticeLevel
    title: str
    detail: str = ""
