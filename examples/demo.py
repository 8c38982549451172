import numpy as np
from dspbase import FilterCoefficients, FilterProcessor, conv, deconv, filt, xcorr

fs = 48000
t = np.arange(fs) / fs
rng = np.random.default_rng(0)

# Stereo test signal: 440 Hz tone + noise
x = np.stack([
    np.sin(2 * np.pi * 440 * t) + 0.1 * rng.standard_normal(fs),
    np.sin(2 * np.pi * 440 * t + 0.3) + 0.1 * rng.standard_normal(fs),
], axis=1)

# One-pole smoother applied to both channels
b, a = [0.05], [1.0, -0.95]
y = filt(b, a, x)

# Same filter in 512-sample chunks, state carried between chunks
proc = FilterProcessor(FilterCoefficients(b=b, a=a))
y_blocks = proc.process(x, block_size=512)
print("max block/continuous diff:", np.max(np.abs(y - y_blocks)))

# Polynomial product and division
p = conv([1, 2], [1, 3])            # (x+2)(x+3) = x² + 5x + 6
print("product:", p)
print("quotient:", deconv(p, [1, 2]))

# Delay estimate between the two channels
r = xcorr(x[:, 0], x[:, 1])
print("lag of correlation peak:", np.argmax(r) - (len(x) - 1))
