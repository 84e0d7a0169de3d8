class InvalidInput(ValueError):
    pass


class PhysicalMemory:
    def __init__(self, num_frames=32):
        self.num_frames = num_frames
        # Each frame stores a PageReference or None if free
        self.frames = [None] * num_frames
        self._index = {}  # PageReference -> frame number

    def find_frame(self, ref):
        return self._index.get(ref)

    def find_free_frame(self):
        for i, frame in enumerate(self.frames):
            if frame is None:
                return i
        return None

    def allocate_frame(self, frame_num, ref):
        holder = self._index.get(ref)
        if holder is not None and holder != frame_num:
            raise InvalidInput(f"{ref} is already resident in frame {holder}")
        previous = self.frames[frame_num]
        if previous is not None:
            del self._index[previous]
        self.frames[frame_num] = ref
        self._index[ref] = frame_num
        return previous

    def is_full(self):
        return len(self._index) == self.num_frames

    def resident_count(self):
        return len(self._index)

    def clear(self):
        self.frames = [None] * self.num_frames
        self._index = {}

    def snapshot(self):
        return list(self.frames)


class Statistics:
    def __init__(self):
        self.reset()

    def reset(self):
        self.page_faults = 0
        self.page_hits = 0
        self.swap_outs = 0
        self.swap_ins = 0

    def record_hit(self):
        self.page_hits += 1

    def record_page_fault(self, evicted=None):
        self.page_faults += 1
        # Every fault loads the faulting page; evicting an occupant is a swap-out too
        self.swap_ins += 1
        if evicted is not None:
            self.swap_outs += 1

    @property
    def total_accesses(self):
        return self.page_faults + self.page_hits

    @property
    def hit_rate(self):
        if self.total_accesses == 0:
            return 0.0
        return self.page_hits / self.total_accesses * 100

    def as_dict(self):
        return {
            'page_faults': self.page_faults,
            'page_hits': self.page_hits,
            'swap_outs': self.swap_outs,
            'swap_ins': self.swap_ins,
        }

    def __str__(self):
        return (f"Page Faults: {self.page_faults}\n"
                f"Page Hits: {self.page_hits}\n"
                f"Swap Outs: {self.swap_outs}\n"
                f"Swap Ins: {self.swap_ins}\n"
                f"Hit Rate: {self.hit_rate:.2f}%")
