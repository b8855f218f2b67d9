from hunthub.schemas.answer import AnswerPayload, AnswerType, ValidateAnswerIn
from hunthub.schemas.challenge import Challenge, Clue, Location, Mission, Option, Quiz, QuizValidation, Task
from hunthub.schemas.hunt import HuntCreateIn, HuntOut, HuntUpdateIn, StepCreateIn, StepOut, StepUpdateIn
from hunthub.schemas.play import HintOut, SessionOut, StartSessionIn, ValidateAnswerOut
from hunthub.schemas.publishing import PublishOut, ReleaseIn, ReleaseOut, TakeOfflineIn, TakeOfflineOut

__all__ = [
    "AnswerPayload",
    "AnswerType",
    "Challenge",
    "Clue",
    "HintOut",
    "HuntCreateIn",
    "HuntOut",
    "HuntUpdateIn",
    "Location",
    "Mission",
    "Option",
    "PublishOut",
    "Quiz",
    "QuizValidation",
    "ReleaseIn",
    "ReleaseOut",
    "SessionOut",
    "StartSessionIn",
    "StepCreateIn",
    "StepOut",
    "StepUpdateIn",
    "TakeOfflineIn",
    "TakeOfflineOut",
    "Task",
    "ValidateAnswerIn",
    "ValidateAnswerOut",
]
