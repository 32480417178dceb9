from datetime import date
from typing import Optional


def years_ago(years: int, today: Optional[date] = None) -> date:
    today = today or date.today()
    try:
        return today.replace(year=today.year - years)
    except ValueError:
        # 29 February in a non-leap year
        return today.replace(year=today.year - years, day=28)
