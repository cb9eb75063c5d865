from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

PayoutPolicyName = Literal[
    "stop_on_first_insufficient_balance",
    "skip_insufficient_and_continue",
]
CreditPolicyName = Literal["every_correct_submission", "first_correct_only"]


class ProjectRules(BaseModel):
    slug: str
    rules_version: str

class LedgerRules(BaseModel):
    payout_policy: PayoutPolicyName = "stop_on_first_insufficient_balance"

class ChapterRules(BaseModel):
    max_content_chars: int = Field(default=100_000, gt=0)
    allowed_formats: list[str] = Field(default_factory=lambda: ["pdf"])

class TriviaRules(BaseModel):
    credit_policy: CreditPolicyName = "every_correct_submission"

class OpsRules(BaseModel):
    data_dir_required: bool = False
    required_env: list[str] = Field(default_factory=list)

class Rules(BaseModel):
    model_config = ConfigDict(extra="forbid")

    project: ProjectRules
    ledger: LedgerRules = Field(default_factory=LedgerRules)
    chapters: ChapterRules = Field(default_factory=ChapterRules)
    trivia: TriviaRules = Field(default_factory=TriviaRules)
    ops: OpsRules = Field(default_factory=OpsRules)
