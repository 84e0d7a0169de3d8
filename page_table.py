from collections import namedtuple

from memory_manager import InvalidInput

PAGE_SIZE = 4096  # bytes


PageReference = namedtuple('PageReference', ['process_id', 'page_number'])


class PageTableEntry:
    def __init__(self, page_number):
        self.page_number = page_number
        self.frame_number = None  # None means not in memory

    def is_valid(self):
        return self.frame_number is not None


class Process:
    def __init__(self, process_id, name, byte_size):
        self.process_id = process_id
        self.name = name
        self.byte_size = byte_size
        self.page_count = (byte_size + PAGE_SIZE - 1) // PAGE_SIZE
        self.entries = [PageTableEntry(i) for i in range(self.page_count)]

    def get_entry(self, page_number):
        if 0 <= page_number < self.page_count:
            return self.entries[page_number]
        return None

    def references(self):
        return [PageReference(self.process_id, i) for i in range(self.page_count)]


class ProcessTable:
    def __init__(self):
        self.processes = []

    def register(self, name, byte_size):
        if byte_size < 0:
            raise InvalidInput(f"Byte size must be non-negative, got {byte_size}")
        process = Process(len(self.processes), name, byte_size)
        self.processes.append(process)
        return process.process_id

    def get(self, process_id):
        if 0 <= process_id < len(self.processes):
            return self.processes[process_id]
        return None

    def set_resident(self, ref, frame_number):
        process = self.get(ref.process_id)
        if process is None:
            return
        entry = process.get_entry(ref.page_number)
        if entry is not None:
            entry.frame_number = frame_number

    def clear_residency(self):
        for process in self.processes:
            for entry in process.entries:
                entry.frame_number = None

    def __len__(self):
        return len(self.processes)

    def __iter__(self):
        return iter(self.processes)
