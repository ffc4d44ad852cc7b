"""Record stores with fixed behaviour for engine tests."""


class StaticRecordStore:
    """RecordStore returning fixed snapshots in the given order."""

    def __init__(self, wines=None, sakes=None):
        self.wines = list(wines or [])
        self.sakes = list(sakes or [])

    async def list_wines(self):
        return list(self.wines)

    async def list_sakes(self):
        return list(self.sakes)


class FailingRecordStore(StaticRecordStore):
    """Raises from one of the list calls."""

    def __init__(self, fail_on="wines", error=None, **kwargs):
        super().__init__(**kwargs)
        self.fail_on = fail_on
        self.error = error or RuntimeError("store unavailable")

    async def list_wines(self):
        if self.fail_on == "wines":
            raise self.error
        return await super().list_wines()

    async def list_sakes(self):
        if self.fail_on == "sakes":
            raise self.error
        return await super().list_sakes()


class FlakyRecordStore(StaticRecordStore):
    """Fails the first `failures` wine fetches, then succeeds."""

    def __init__(self, failures, error, **kwargs):
        super().__init__(**kwargs)
        self.failures = failures
        self.error = error
        self.calls = 0

    async def list_wines(self):
        self.calls += 1
        if self.calls <= self.failures:
            raise self.error
        return await super().list_wines()
