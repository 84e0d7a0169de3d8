import csv
import json


def format_reference(ref):
    if ref is None:
        return None
    return {'processId': ref.process_id, 'pageNumber': ref.page_number}


def format_response(decision, stats):
    return {
        'type': decision.outcome,
        'processId': decision.reference.process_id,
        'pageNumber': decision.reference.page_number,
        'frameNumber': decision.frame_number,
        'victimPage': format_reference(decision.evicted),
        'pageFaults': stats.page_faults,
        'pageHits': stats.page_hits,
        'swapOuts': stats.swap_outs,
        'swapIns': stats.swap_ins,
    }


def format_state(state):
    return {
        'ramSize': state['ram_kb'],
        'numFrames': state['frame_count'],
        'memory': [format_reference(ref) for ref in state['frames']],
        'usedFrames': state['resident_count'],
        'processes': state['process_count'],
        'pageFaults': state['page_faults'],
        'pageHits': state['page_hits'],
        'swapOuts': state['swap_outs'],
        'swapIns': state['swap_ins'],
        'totalAccesses': state['total_accesses'],
        'hitRate': round(state['hit_rate'], 2),
    }


def to_json(record):
    return json.dumps(record)


def export_statistics_csv(filename, simulator, algorithm):
    state = simulator.query_state()
    rows = [
        ('Metric', 'Value'),
        ('RAM Size (KB)', state['ram_kb']),
        ('Number of Frames', state['frame_count']),
        ('Algorithm', algorithm.upper()),
        ('Total Page Accesses', state['total_accesses']),
        ('Page Faults', state['page_faults']),
        ('Page Hits', state['page_hits']),
        ('Hit Rate (%)', f"{state['hit_rate']:.2f}"),
        ('Swap Outs', state['swap_outs']),
        ('Swap Ins', state['swap_ins']),
        ('Processes Loaded', state['process_count']),
    ]
    with open(filename, 'w', newline='') as f:
        csv.writer(f).writerows(rows)
