"""Names of the tools offered to the agent."""

WEB_SEARCH = "verifaible_web_search"
WEB_FETCH = "web_fetch"
ANALYZE_PAGE = "analyze_page"
TEST_ACTION_STEPS = "test_action_steps"
VIDEO_TRANSCRIPT = "video_transcript"
CITE = "verifaible_cite"

ALL = (WEB_SEARCH, WEB_FETCH, ANALYZE_PAGE, TEST_ACTION_STEPS, VIDEO_TRANSCRIPT, CITE)
