class Selection:
    """
    Selected row of the port list, kept valid against the list length.

    `index` is None while the list is empty. Only next(), previous() and
    reconcile() change it.
    """

    def __init__(self, count=0):
        self.count = count
        self._index = None

    @property
    def index(self):
        return self._index

    def next(self):
        if self.count == 0:
            return
        if self._index is None:
            self._index = 0
        else:
            self._index = (self._index + 1) % self.count

    def previous(self):
        if self.count == 0:
            return
        if self._index is None:
            self._index = 0
        elif self._index == 0:
            self._index = self.count - 1
        else:
            self._index -= 1

    def reconcile(self, new_count):
        """Re-anchor the selection after the list was rebuilt."""
        self.count = new_count
        if new_count == 0:
            self._index = None
        elif self._index is None:
            self._index = 0
        elif self._index >= new_count:
            self._index = new_count - 1
