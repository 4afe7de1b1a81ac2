from __future__ import annotations

import io
import tarfile
import zipfile
from collections.abc import Callable

import pytest

TTOP_SAMPLE = """top - 12:02:03 up  3:07,  0 users,  load average: 3.18, 1.16, 0.41
Threads: 262 total,   6 running, 256 sleeping,   0 stopped,   0 zombie
%Cpu(s): 41.4 us,  2.4 sy,  0.0 ni, 55.9 id,  0.0 wa,  0.0 hi,  0.2 si,  0.0 st
MiB Mem :  16008.2 total,  10953.7 free,   3713.5 used,   1341.1 buff/cache
MiB Swap:      0.0 total,      0.0 free,      0.0 used.  12032.0 avail Mem

    PID USER      PR  NI    VIRT    RES    SHR S  %CPU  %MEM     TIME+ COMMAND
   1234 dremio    20   0   12.3g   4.1g  35512 R  99.9  26.0   1:02.33 C2 CompilerThre
   1250 dremio    20   0   12.3g   4.1g  35512 S   5.0  26.0   0:10.01 qtp1-47

top - 12:02:04 up  3:07,  0 users,  load average: 3.18, 1.16, 0.41
Threads: 262 total,   2 running, 260 sleeping,   0 stopped,   0 zombie
MiB Mem :  16008.2 total,  10950.1 free,   3717.1 used,   1341.1 buff/cache
MiB Swap:      0.0 total,      0.0 free,      0.0 used.  12028.4 avail Mem

    PID USER      PR  NI    VIRT    RES    SHR S  %CPU  %MEM     TIME+ COMMAND
   1234 dremio    20   0   12.3g   4.1g  35512 S  12.5  26.0   1:02.46 C2 CompilerThre
   1301 root      20   0    8.0m   1.2m    900 S   1.0   0.1   0:00.02 sshd
"""

_DEVICE_HEADER = (
    "Device            r/s     rkB/s   rrqm/s  %rrqm r_await rareq-sz     w/s     wkB/s"
    "   wrqm/s  %wrqm w_await wareq-sz     d/s     dkB/s   drqm/s  %drqm d_await dareq-sz"
    "     f/s f_await  aqu-sz  %util"
)

IOSTAT_SAMPLE = f"""Linux 5.10.0-32-cloud-amd64 (ddc-test-dremio-master) \t09/04/24 \t_x86_64_\t(4 CPU)

09/04/24 12:07:20
avg-cpu:  %user   %nice %system %iowait  %steal   %idle
           2.36    0.00    0.40    0.04    0.01   97.20

{_DEVICE_HEADER}
sda              2.08     94.38     0.31  13.07    0.89    45.47    9.58    210.39     5.55  36.68    2.74    21.96    0.09    377.20     0.00   0.00    0.95  4151.86    3.94    0.06    0.03   1.39


09/04/24 12:07:21
avg-cpu:  %user   %nice %system %iowait  %steal   %idle
          33.91    0.00    7.67    2.72    0.00   55.69

{_DEVICE_HEADER}
sda              0.00      0.00     0.00   0.00    0.00     0.00  395.00  38116.00   133.00  25.19    8.65    96.50    1.00      4.00     0.00   0.00    1.00     4.00  122.00    0.06    3.42  39.20
"""


@pytest.fixture
def ttop_text() -> str:
    return TTOP_SAMPLE


@pytest.fixture
def iostat_text() -> str:
    return IOSTAT_SAMPLE


@pytest.fixture
def make_zip() -> Callable[[dict[str, bytes]], bytes]:
    def _make(entries: dict[str, bytes]) -> bytes:
        buf = io.BytesIO()
        with zipfile.ZipFile(buf, "w") as zf:
            for name, data in entries.items():
                zf.writestr(name, data)
        return buf.getvalue()

    return _make


@pytest.fixture
def make_tar() -> Callable[..., bytes]:
    def _make(entries: dict[str, bytes], *, gz: bool = False, dirs: tuple[str, ...] = ()) -> bytes:
        buf = io.BytesIO()
        with tarfile.open(fileobj=buf, mode="w:gz" if gz else "w") as tf:
            for d in dirs:
                info = tarfile.TarInfo(d)
                info.type = tarfile.DIRTYPE
                tf.addfile(info)
            for name, data in entries.items():
                info = tarfile.TarInfo(name)
                info.size = len(data)
                tf.addfile(info, io.BytesIO(data))
        return buf.getvalue()

    return _make
