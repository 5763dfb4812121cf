"""
Data contracts for the editorial analyzer.

ContentRow is built locally by the CSV ingestor. Everything else mirrors the
JSON object Gemini returns; field aliases keep the camelCase wire names while
Python code uses snake_case attributes.
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field


class _ContractModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class ContentRow(_ContractModel):
    """One input record: a story URL, its headline and its user count."""

    url: str = Field(min_length=1)
    headline: str = Field(min_length=1)
    total_users: int = Field(alias="totalUsers", ge=0)


class ThemePerformance(_ContractModel):
    theme: str
    story_count: int = Field(alias="storyCount")
    total_users: int = Field(alias="totalUsers")
    users_per_story: float = Field(alias="usersPerStory")


class ThemeKeywords(_ContractModel):
    theme: str
    top_keywords: List[str] = Field(alias="topKeywords")
    top_entities: List[str] = Field(alias="topEntities")


class KeywordPerformance(_ContractModel):
    keyword: str
    story_count: int = Field(alias="storyCount")
    total_users: int = Field(alias="totalUsers")
    users_per_story: float = Field(alias="usersPerStory")


class StylePerformance(_ContractModel):
    style: str
    avg_users_per_story: float = Field(alias="avgUsersPerStory")
    notes: str


class EditorialRecommendations(_ContractModel):
    increase: List[str]
    optimize: List[str]
    decrease: List[str]
    experiment: List[str]


class PerformanceExtreme(_ContractModel):
    """Best or worst theme by users per story."""

    theme: str
    metric: str
    value: float
    explanation: str
    count: int
    total_reach: int = Field(alias="totalReach")


class AnalysisResult(_ContractModel):
    total_records_analyzed: int = Field(alias="totalRecordsAnalyzed")
    themes: List[ThemePerformance]
    keywords: List[ThemeKeywords]
    keyword_performance: List[KeywordPerformance] = Field(alias="keywordPerformance")
    styles: List[StylePerformance]
    recommendations: EditorialRecommendations
    insights: List[str]
    top_performer: PerformanceExtreme = Field(alias="topPerformer")
    bottom_performer: PerformanceExtreme = Field(alias="bottomPerformer")
