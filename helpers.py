# helpers.py
from typing import List, Tuple

import pandas as pd

from constants import RECOMMENDATION_SECTIONS
from models import AnalysisResult, ContentRow


def format_users(value) -> str:
    """Rounds a user count or rate to a whole number with thousands separators."""
    if value is None or pd.isna(value):
        return "-"
    return f"{round(value):,}"


def format_performance_df(df: pd.DataFrame) -> pd.DataFrame:
    """Applies standard formatting to a performance DataFrame for display."""
    if df.empty:
        return df

    formatted_df = df.copy()

    for col in formatted_df.columns:
        if ('Users' in col or 'Reach' in col or 'U/S' in col) and pd.api.types.is_numeric_dtype(formatted_df[col]):
            formatted_df[col] = formatted_df[col].map(format_users)
        elif 'Stories' in col and pd.api.types.is_numeric_dtype(formatted_df[col]):
            formatted_df[col] = formatted_df[col].map('{:,.0f}'.format)

    return formatted_df


def rows_to_df(rows: List[ContentRow]) -> pd.DataFrame:
    """Preview table of the ingested rows."""
    return pd.DataFrame(
        [{'URL': r.url, 'Headline': r.headline, 'Total Users': r.total_users} for r in rows],
        columns=['URL', 'Headline', 'Total Users']
    )


def themes_to_df(result: AnalysisResult) -> pd.DataFrame:
    """
    Builds the theme performance matrix.

    Sorted by total users, highest first. 'Above Average' marks themes whose
    users per story beats the mean users per story across all themes.
    """
    columns = ['Theme', 'Stories', 'Total Users', 'Users Per Story', 'Above Average']
    if not result.themes:
        return pd.DataFrame(columns=columns)

    df = pd.DataFrame([
        {
            'Theme': t.theme,
            'Stories': t.story_count,
            'Total Users': t.total_users,
            'Users Per Story': t.users_per_story,
        }
        for t in result.themes
    ])
    average_rate = df['Users Per Story'].mean()
    df['Above Average'] = df['Users Per Story'] > average_rate
    df = df.sort_values('Total Users', ascending=False, kind='stable').reset_index(drop=True)
    return df[columns]


def keyword_performance_to_df(result: AnalysisResult) -> pd.DataFrame:
    columns = ['Keyword', 'Stories', 'Total Users', 'Users Per Story']
    return pd.DataFrame(
        [
            {
                'Keyword': k.keyword,
                'Stories': k.story_count,
                'Total Users': k.total_users,
                'Users Per Story': k.users_per_story,
            }
            for k in result.keyword_performance
        ],
        columns=columns
    )


def theme_keywords_to_df(result: AnalysisResult) -> pd.DataFrame:
    columns = ['Theme', 'Top Keywords', 'Top Entities']
    return pd.DataFrame(
        [
            {
                'Theme': k.theme,
                'Top Keywords': ", ".join(k.top_keywords),
                'Top Entities': ", ".join(k.top_entities),
            }
            for k in result.keywords
        ],
        columns=columns
    )


def styles_to_df(result: AnalysisResult) -> pd.DataFrame:
    columns = ['Style', 'Avg Users Per Story', 'Notes']
    return pd.DataFrame(
        [
            {'Style': s.style, 'Avg Users Per Story': s.avg_users_per_story, 'Notes': s.notes}
            for s in result.styles
        ],
        columns=columns
    )


def recommendation_sections(result: AnalysisResult) -> List[Tuple[str, List[str]]]:
    """Returns (title, suggestions) pairs in roadmap order."""
    return [
        (title, list(getattr(result.recommendations, field)))
        for title, field in RECOMMENDATION_SECTIONS
    ]


def reconciliation_message(result: AnalysisResult, row_count: int) -> str:
    return f"Processed {result.total_records_analyzed} of {row_count} stories successfully."
