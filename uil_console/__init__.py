"""
UIL Console -- Universal Integration Layer analytics console

Client-side console over the UIL REST API: commerce, gaming and fintech
profiles for one user, cross-platform insights, and coordinated actions.

Usage:
    from uil_console.console import AnalyticsConsole

    async with AnalyticsConsole() as console:
        console.select("user_002")
        await console.wait_idle()
        model = console.view_model()
"""

__version__ = "1.0.0"
