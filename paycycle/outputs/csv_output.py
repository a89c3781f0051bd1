# paycycle/outputs/csv_output.py

import os
import csv
from paycycle.outputs.base import BaseOutput


class CSVOutput(BaseOutput):
    """
    Writes one user's pay-period report to Report-<userId>.csv,
    one row per week in chronological order.
    """
    HEADERS = ['week_start', 'weekday_start', 'week_end', 'weekday_end',
               'quantity', 'amount', 'total_amount']

    def __init__(self, config):
        self.config     = config
        self.output_dir = config.get('output_dir', 'data')
        os.makedirs(self.output_dir, exist_ok=True)

    def write(self, user_id, buckets):
        out_path = os.path.join(self.output_dir, f"Report-{user_id}.csv")
        with open(out_path, 'w', newline='') as f:
            writer = csv.writer(f)
            writer.writerow(self.HEADERS)
            for bucket in buckets:
                writer.writerow([
                    bucket.start.isoformat(),
                    bucket.weekday_start,
                    bucket.end.isoformat(),
                    bucket.weekday_end,
                    len(bucket.transactions),
                    f"{bucket.amount:.2f}",
                    f"{bucket.total_amount:.2f}",
                ])
        return out_path
