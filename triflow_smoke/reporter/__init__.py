from triflow_smoke.reporter.reporter import ContentPart, ResultReporter

__all__ = ["ContentPart", "ResultReporter"]
