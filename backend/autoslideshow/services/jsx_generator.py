"""Premiere Pro ExtendScript generation for slideshow creation and export."""

import json

from ..config import Settings, settings as default_settings
from ..models import ExportJob, SlideshowPlan


def _indent_json(data: object) -> str:
    """JSON with the indentation used inside the generated scripts."""
    text = json.dumps(data, indent=4, ensure_ascii=False)
    return "\n".join("  " + line for line in text.split("\n"))


class JsxGenerator:
    """Renders ES3-compatible .jsx scripts from computed plans."""

    @classmethod
    def slideshow_data(cls, plan: SlideshowPlan) -> dict:
        """The data block embedded in the creation script."""
        images = []
        for placement in plan.placement.placements:
            images.append({
                "path": plan.preview.image_paths[placement.index],
                "track": placement.track_parity,
                "frames": placement.duration_frames,
                "startTicks": str(placement.start_tick),
                # Full repr: json keeps every bit of the frame-aligned seconds
                "position": placement.position_seconds,
                "duration": placement.duration_seconds,
            })
        return {
            "folderName": plan.preview.folder_name,
            "sequenceName": plan.sequence_name,
            "bins": {
                "root": plan.bins.root,
                "project": plan.bins.project,
                "images": plan.bins.images,
                "voiceovers": plan.bins.voiceovers,
                "captions": plan.bins.captions,
            },
            "voicePath": plan.preview.voice_path,
            "voiceDuration": plan.voice_duration,
            "srtPath": plan.preview.srt_path,
            "frameRate": plan.frame_rate,
            "ticksPerFrame": str(plan.ticks_per_frame),
            "totalFrames": plan.duration_plan.total_frames,
            "images": images,
        }

    @classmethod
    def generate_create_script(
        cls,
        plan: SlideshowPlan,
        settings: Settings | None = None,
    ) -> str:
        """
        Generate the ExtendScript that builds a slideshow in the active sequence.

        The script places the voiceover on A1 at 0, places each image at its
        precomputed frame-aligned position alternating V1/V2, runs the gap-fix
        pass over the observed clip ticks, and imports captions when an SRT
        file is present.

        Args:
            plan: Slideshow plan with frame counts and placements
            settings: Settings to read settle delays and timebase from

        Returns:
            The generated JSX script content (ES3 compatible)
        """
        settings = settings or default_settings
        data_indented = _indent_json(cls.slideshow_data(plan))

        jsx_content = f'''/**
 * Auto Slideshow Creator - Premiere Pro Slideshow Script
 *
 * Slideshow: {plan.preview.folder_name}
 * Images: {plan.preview.image_count} | Voice: {plan.voice_duration:.3f}s | Rate: {plan.frame_rate_label}
 *
 * Track layout: V1 (images 1, 3, 5...), V2 (images 2, 4, 6...), A1 (voiceover).
 */

(function () {{
  // ========================================================================
  // 1. CONFIGURATION
  // ========================================================================
  var SCRIPT_FILE = new File($.fileName);
  var ROOT_DIR = SCRIPT_FILE.parent.fsName;
  var TICKS_PER_SECOND = {settings.ticks_per_second};
  var IMPORT_SETTLE_MS = {settings.import_settle_ms};
  var CAPTION_SETTLE_MS = {settings.caption_settle_ms};
  var MIN_VIDEO_TRACKS = {settings.min_video_tracks};

  // --- SLIDESHOW DATA ---
  var slideshow =
{data_indented};

  // ========================================================================
  // 2. LOGGING & UTILS
  // ========================================================================
  var LOG_LINES = [];

  function log(msg) {{
    LOG_LINES.push(msg);
    $.writeln("[ASC] " + msg);
  }}

  function writeLog() {{
    try {{
      var f = new File(ROOT_DIR + "/run_log_host.txt");
      f.encoding = "UTF-8";
      if (f.open("w")) {{
        f.write(LOG_LINES.join("\\n"));
        f.close();
      }}
    }} catch (e) {{}}
  }}

  function getTicks(time) {{
    if (!time) return null;
    if (time.ticks !== undefined) {{
      var val = parseInt(time.ticks, 10);
      if (!isNaN(val)) return val;
    }}
    if (typeof time.seconds === "number") {{
      return Math.round(time.seconds * TICKS_PER_SECOND);
    }}
    return null;
  }}

  function buildTimeFromTicks(ticks) {{
    var t = new Time();
    t.ticks = String(ticks);
    return t;
  }}

  function createBinIfNotExists(parentBin, binName) {{
    for (var i = 0; i < parentBin.children.numItems; i++) {{
      var item = parentBin.children[i];
      if (item.type === ProjectItemType.BIN && item.name === binName) {{
        return item;
      }}
    }}
    return parentBin.createBin(binName);
  }}

  function createSlideshowBins() {{
    var rootBin = createBinIfNotExists(app.project.rootItem, slideshow.bins.root);
    var projectBin = createBinIfNotExists(rootBin, slideshow.bins.project);
    return {{
      images: createBinIfNotExists(projectBin, slideshow.bins.images),
      voiceovers: createBinIfNotExists(projectBin, slideshow.bins.voiceovers),
      captions: createBinIfNotExists(projectBin, slideshow.bins.captions)
    }};
  }}

  function normalizePath(p) {{
    return p ? p.replace(/\\\\/g, "/") : p;
  }}

  function findProjectItemByPath(filePath) {{
    var target = normalizePath(filePath);
    var searchInBin = function (bin) {{
      for (var i = 0; i < bin.children.numItems; i++) {{
        var item = bin.children[i];
        if (item.type === ProjectItemType.BIN) {{
          var found = searchInBin(item);
          if (found) return found;
        }} else {{
          try {{
            if (normalizePath(item.getMediaPath()) === target) return item;
          }} catch (e) {{}}
        }}
      }}
      return null;
    }};
    return searchInBin(app.project.rootItem);
  }}

  // ========================================================================
  // 3. GAP FIX
  // ========================================================================
  function collectClips(tracks) {{
    var clips = [];
    for (var t = 0; t < tracks.length; t++) {{
      var track = tracks[t];
      for (var i = 0; i < track.clips.numItems; i++) {{
        var clip = track.clips[i];
        var start = getTicks(clip.start);
        var end = getTicks(clip.end);
        if (start === null || end === null) continue;
        clips.push({{ item: clip, track: t, start: start, end: end }});
      }}
    }}
    clips.sort(function (a, b) {{
      return a.start !== b.start ? a.start - b.start : a.track - b.track;
    }});
    return clips;
  }}

  function closeGaps(tracks) {{
    var clips = collectClips(tracks);
    var fixed = 0;
    var overlaps = 0;
    for (var i = 0; i < clips.length - 1; i++) {{
      var gap = clips[i + 1].start - clips[i].end;
      if (gap > 0) {{
        try {{
          clips[i].item.end = buildTimeFromTicks(clips[i + 1].start);
          clips[i].end = clips[i + 1].start;
          fixed++;
          log("Gap fix: clip " + (i + 1) + " extended by " + gap + " ticks");
        }} catch (e) {{
          log("Gap fix failed for clip " + (i + 1) + ": " + e.toString());
        }}
      }} else if (gap < 0) {{
        overlaps++;
      }}
    }}
    log("Gap fix complete: " + fixed + " gap(s) closed, " + overlaps + " overlap(s) left");
    return fixed;
  }}

  // ========================================================================
  // 4. MAIN LOGIC
  // ========================================================================
  function main() {{
    if (!app.project) {{
      alert("Open a project.");
      return;
    }}

    var sequence = app.project.activeSequence;
    if (!sequence) {{
      alert("No active sequence. Please create or open a sequence first.");
      return;
    }}
    if (sequence.videoTracks.numTracks < MIN_VIDEO_TRACKS) {{
      alert("Sequence needs at least 2 video tracks. Please add another video track.");
      return;
    }}

    var seqTicksPerFrame = parseInt(sequence.timebase, 10);
    if (!isNaN(seqTicksPerFrame) && String(seqTicksPerFrame) !== slideshow.ticksPerFrame) {{
      log("Warning: sequence timebase " + seqTicksPerFrame + " differs from planned " + slideshow.ticksPerFrame);
    }}

    // The batch export finds slideshow sequences by this name
    if (sequence.name !== slideshow.sequenceName) {{
      log("Renaming sequence '" + sequence.name + "' to '" + slideshow.sequenceName + "'");
      sequence.name = slideshow.sequenceName;
    }}

    var bins = createSlideshowBins();

    // --- IMPORT ---
    var imagePaths = [];
    for (var i = 0; i < slideshow.images.length; i++) {{
      imagePaths.push(slideshow.images[i].path);
    }}
    try {{
      app.project.importFiles(imagePaths, true, bins.images, false);
      if (!findProjectItemByPath(slideshow.voicePath)) {{
        app.project.importFiles([slideshow.voicePath], true, bins.voiceovers, false);
      }}
    }} catch (e) {{
      alert("Failed to import files into project: " + e.toString());
      return;
    }}
    $.sleep(IMPORT_SETTLE_MS);

    var voiceItem = findProjectItemByPath(slideshow.voicePath);
    if (!voiceItem) {{
      alert("Could not find imported voice file in project.");
      return;
    }}

    // --- VOICE (A1) ---
    sequence.audioTracks[0].overwriteClip(voiceItem, 0);
    log("Voice placed on A1 (" + slideshow.voiceDuration + "s)");

    // --- IMAGES (V1 / V2) ---
    var videoTracks = [sequence.videoTracks[0], sequence.videoTracks[1]];
    var placed = 0;
    for (var j = 0; j < slideshow.images.length; j++) {{
      var img = slideshow.images[j];
      var imgItem = findProjectItemByPath(img.path);
      if (!imgItem) {{
        log("Warning: image not found in project: " + img.path);
        continue;
      }}
      imgItem.setInPoint(0, 4); // 4 = all media types
      imgItem.setOutPoint(img.duration, 4);
      videoTracks[img.track].overwriteClip(imgItem, img.position);
      placed++;
    }}
    log("Placed " + placed + " of " + slideshow.images.length + " images");

    // --- GAP FIX ---
    closeGaps(videoTracks);

    // --- CAPTIONS ---
    var hasCaptions = false;
    if (slideshow.srtPath) {{
      app.project.importFiles([slideshow.srtPath], true, bins.captions, false);
      $.sleep(CAPTION_SETTLE_MS);
      var srtItem = findProjectItemByPath(slideshow.srtPath);
      if (srtItem) {{
        sequence.createCaptionTrack(srtItem, 0);
        hasCaptions = true;
        log("Caption track created");
      }}
    }}

    writeLog();
    alert(
      "Done! " + placed + " images, " + slideshow.totalFrames + " frames" +
        (hasCaptions ? " with captions." : ".")
    );
  }}

  main();
}})();
'''
        return jsx_content

    @classmethod
    def generate_export_script(cls, jobs: list[ExportJob]) -> str:
        """
        Generate the ExtendScript that queues sequences in Adobe Media Encoder.

        Each job names a sequence in the open project, the output file and the
        .epr preset. Missing sequences are counted as failures.
        """
        jobs_indented = _indent_json([
            {
                "sequenceName": job.sequence_name,
                "outputPath": job.output_path,
                "presetPath": job.preset_path,
            }
            for job in jobs
        ])

        jsx_content = f'''/**
 * Auto Slideshow Creator - Media Encoder Batch Export Script
 *
 * Queues {len(jobs)} slideshow sequence(s) to Adobe Media Encoder.
 */

(function () {{
  var jobs =
{jobs_indented};

  function log(msg) {{
    $.writeln("[ASC] " + msg);
  }}

  function findSequenceByName(name) {{
    for (var i = 0; i < app.project.sequences.numSequences; i++) {{
      var seq = app.project.sequences[i];
      if (seq.name === name) return seq;
    }}
    return null;
  }}

  function main() {{
    if (!app.project) {{
      alert("Open a project.");
      return;
    }}
    if (jobs.length === 0) {{
      alert("No slideshows found");
      return;
    }}

    app.encoder.launchEncoder();

    var exported = 0;
    var errors = [];
    for (var i = 0; i < jobs.length; i++) {{
      var job = jobs[i];
      var seq = findSequenceByName(job.sequenceName);
      if (!seq) {{
        errors.push("Sequence not found: " + job.sequenceName);
        continue;
      }}
      try {{
        // 0 = entire sequence, 1 = remove from queue when done
        var jobId = app.encoder.encodeSequence(seq, job.outputPath, job.presetPath, 0, 1);
        if (jobId) {{
          exported++;
          log("Queued " + job.sequenceName + " -> " + job.outputPath);
        }} else {{
          errors.push("Queue failed: " + job.sequenceName);
        }}
      }} catch (e) {{
        errors.push(job.sequenceName + ": " + e.toString());
      }}
    }}

    if (exported > 0) {{
      app.encoder.startBatch();
    }}

    var message = "Queued " + exported + " slideshow(s) to AME.";
    if (errors.length > 0) {{
      message += " (" + errors.length + " failed)\\n" + errors.join("\\n");
    }}
    alert(message);
  }}

  main();
}})();
'''
        return jsx_content
